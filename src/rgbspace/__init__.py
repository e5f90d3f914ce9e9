"""Color conversions between RGB color spaces, CIE XYZ and HDR encodings."""

from .cat import LmsConeSpace, adaptation_matrix
from .color import Color
from .conversion import ConversionCache, ConversionTransform, convert, derive
from .errors import (
    CanonicalizationFailedError,
    ColorError,
    DegenerateWhitePointError,
    IncompatibleModelError,
    InvalidPrimariesError,
    SingularMatrixError,
    UnknownColorSpaceError,
)
from .linalg import FLOAT
from .model import CieLab, CieLch, CieLuv, ColorModel, Hsl, Hsv, Ictcp, Oklab, Oklch, Rgb, Xyy
from .primaries import Primaries, rgb_to_xyz_matrix
from .space import ColorSpace
from .spaces import SPACES, get_space
from .transfer import Bt709, Gamma, Hlg, Linear, LogC3, Pq, Srgb, TransferFunction
from .whitepoint import Chromaticity, WhitePoint

__version__ = "0.2.0"

__all__ = [
    "FLOAT",
    "Bt709",
    "CanonicalizationFailedError",
    "Chromaticity",
    "Color",
    "CieLab",
    "CieLch",
    "CieLuv",
    "ColorError",
    "ColorModel",
    "ColorSpace",
    "ConversionCache",
    "ConversionTransform",
    "DegenerateWhitePointError",
    "Gamma",
    "Hlg",
    "Hsl",
    "Hsv",
    "Ictcp",
    "IncompatibleModelError",
    "InvalidPrimariesError",
    "Linear",
    "LmsConeSpace",
    "LogC3",
    "Oklab",
    "Oklch",
    "Pq",
    "Primaries",
    "Rgb",
    "SPACES",
    "SingularMatrixError",
    "Srgb",
    "TransferFunction",
    "UnknownColorSpaceError",
    "WhitePoint",
    "Xyy",
    "adaptation_matrix",
    "convert",
    "derive",
    "get_space",
    "rgb_to_xyz_matrix",
]

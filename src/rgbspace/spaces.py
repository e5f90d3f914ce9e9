"""Well-known color spaces, by constant and by name."""

from __future__ import annotations

import re
from types import MappingProxyType
from typing import Mapping

from . import model as cm
from . import primaries as gamut
from . import whitepoint as wp
from .errors import UnknownColorSpaceError
from .primaries import Primaries
from .space import ColorSpace
from .transfer import BT709, HLG, LINEAR, LOGC3, PQ, SRGB as SRGB_CURVE, Gamma, TransferFunction


def _space(
    name: str,
    triple: gamut.ChromaticityTriple,
    white: wp.WhitePoint,
    transfer: TransferFunction,
    gamut_name: str,
    model: cm.ColorModel = cm.RGB,
) -> ColorSpace:
    red, green, blue = triple
    return ColorSpace(Primaries(red, green, blue, white, name=gamut_name), transfer, model, name=name)

SRGB = _space("srgb", gamut.BT709, wp.D65, SRGB_CURVE, "bt709")
LINEAR_SRGB = _space("linear_srgb", gamut.BT709, wp.D65, LINEAR, "bt709")
BT_709 = _space("bt709", gamut.BT709, wp.D65, BT709, "bt709")

DISPLAY_P3 = _space("display_p3", gamut.P3, wp.D65, SRGB_CURVE, "p3")
LINEAR_DISPLAY_P3 = _space("linear_display_p3", gamut.P3, wp.D65, LINEAR, "p3")
DCI_P3 = _space("dci_p3", gamut.P3, wp.DCI, Gamma(2.6), "p3")

BT_2020 = _space("bt2020", gamut.BT2020, wp.D65, BT709, "bt2020")
LINEAR_BT_2020 = _space("linear_bt2020", gamut.BT2020, wp.D65, LINEAR, "bt2020")
BT_2100_PQ = _space("bt2100_pq", gamut.BT2020, wp.D65, PQ, "bt2020")
BT_2100_HLG = _space("bt2100_hlg", gamut.BT2020, wp.D65, HLG, "bt2020")

ACES2065_1 = _space("aces2065_1", gamut.AP0, wp.D60, LINEAR, "ap0")
ACES_CG = _space("acescg", gamut.AP1, wp.D60, LINEAR, "ap1")

ADOBE_RGB = _space("adobe_rgb", gamut.ADOBE_RGB, wp.D65, Gamma(563.0 / 256.0), "adobe_rgb")

ARRI_LOGC3_AWG = _space("arri_logc3_awg", gamut.ARRI_WIDE_GAMUT_3, wp.D65, LOGC3, "arri_wide_gamut_3")
LINEAR_AWG = _space("linear_awg", gamut.ARRI_WIDE_GAMUT_3, wp.D65, LINEAR, "arri_wide_gamut_3")

CIE_RGB = _space("cie_rgb", gamut.CIE_RGB, wp.E, LINEAR, "cie_rgb")
CIE_XYZ = _space("cie_xyz", gamut.XYZ_AXES, wp.D65, LINEAR, "xyz")
CIE_XYZ_D50 = _space("cie_xyz_d50", gamut.XYZ_AXES, wp.D50, LINEAR, "xyz")

# Color models over a reference space. The CIE models, Oklab and Oklch sit on
# CIE XYZ; their white point is the reference white.
CIE_XYY = _space("cie_xyy", gamut.XYZ_AXES, wp.D65, LINEAR, "xyz", cm.XYY)
CIE_LAB = _space("cie_lab", gamut.XYZ_AXES, wp.D65, LINEAR, "xyz", cm.CIE_LAB)
CIE_LAB_D50 = _space("cie_lab_d50", gamut.XYZ_AXES, wp.D50, LINEAR, "xyz", cm.CIE_LAB)
CIE_LCH = _space("cie_lch", gamut.XYZ_AXES, wp.D65, LINEAR, "xyz", cm.CIE_LCH)
CIE_LUV = _space("cie_luv", gamut.XYZ_AXES, wp.D65, LINEAR, "xyz", cm.CIE_LUV)
OKLAB = _space("oklab", gamut.XYZ_AXES, wp.D65, LINEAR, "xyz", cm.OKLAB)
OKLCH = _space("oklch", gamut.XYZ_AXES, wp.D65, LINEAR, "xyz", cm.OKLCH)
ICTCP_PQ = _space("ictcp_pq", gamut.BT2020, wp.D65, LINEAR, "bt2020", cm.ICTCP)
HSL = _space("hsl", gamut.BT709, wp.D65, SRGB_CURVE, "bt709", cm.HSL)
HSV = _space("hsv", gamut.BT709, wp.D65, SRGB_CURVE, "bt709", cm.HSV)


SPACES: Mapping[str, ColorSpace] = MappingProxyType(
    {
        space.name: space
        for space in (
            SRGB,
            LINEAR_SRGB,
            BT_709,
            DISPLAY_P3,
            LINEAR_DISPLAY_P3,
            DCI_P3,
            BT_2020,
            LINEAR_BT_2020,
            BT_2100_PQ,
            BT_2100_HLG,
            ACES2065_1,
            ACES_CG,
            ADOBE_RGB,
            ARRI_LOGC3_AWG,
            LINEAR_AWG,
            CIE_RGB,
            CIE_XYZ,
            CIE_XYZ_D50,
            CIE_XYY,
            CIE_LAB,
            CIE_LAB_D50,
            CIE_LCH,
            CIE_LUV,
            OKLAB,
            OKLCH,
            ICTCP_PQ,
            HSL,
            HSV,
        )
        if space.name is not None
    }
)


_ALIASES = {
    "bt_709": "bt709",
    "rec709": "bt709",
    "rec_709": "bt709",
    "bt_2020": "bt2020",
    "rec2020": "bt2020",
    "rec_2020": "bt2020",
    "aces_cg": "acescg",
    "aces": "aces2065_1",
    "p3": "display_p3",
    "srgb_linear": "linear_srgb",
    "xyz": "cie_xyz",
    "xyz_d65": "cie_xyz",
    "xyz_d50": "cie_xyz_d50",
    "xyy": "cie_xyy",
    "lab": "cie_lab",
    "cielab": "cie_lab",
    "lab_d50": "cie_lab_d50",
    "lch": "cie_lch",
    "luv": "cie_luv",
    "ok_lab": "oklab",
    "ok_lch": "oklch",
    "ictcp": "ictcp_pq",
}


def normalize_space_name(name: str) -> str:
    """``"ACES2065-1"`` -> ``"aces2065_1"``, ``"Display P3"`` -> ``"display_p3"``."""

    text = re.sub(r"[^a-z0-9]+", "_", name.strip().lower()).strip("_")
    return _ALIASES.get(text, text)


def get_space(name: str) -> ColorSpace:
    key = normalize_space_name(name)
    if key not in SPACES:
        raise UnknownColorSpaceError(f"unknown color space: {name!r}")
    return SPACES[key]

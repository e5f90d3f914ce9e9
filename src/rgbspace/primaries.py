from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Sequence

import numpy as np

from .errors import CanonicalizationFailedError, InvalidPrimariesError, SingularMatrixError
from .linalg import EPSILON, FLOAT, Mat3, freeze, identity, inverse
from .whitepoint import Chromaticity, DETECTION_TOLERANCE, WhitePoint, coerce_white_point


ChromaticityTriple = tuple[Chromaticity, Chromaticity, Chromaticity]


def _triple(r: tuple[float, float], g: tuple[float, float], b: tuple[float, float]) -> ChromaticityTriple:
    return (Chromaticity(*r), Chromaticity(*g), Chromaticity(*b))


# Red, green, blue chromaticities of well-known gamuts.
BT709 = _triple((0.64, 0.33), (0.30, 0.60), (0.15, 0.06))
BT2020 = _triple((0.708, 0.292), (0.170, 0.797), (0.131, 0.046))
P3 = _triple((0.680, 0.320), (0.265, 0.690), (0.150, 0.060))
ADOBE_RGB = _triple((0.64, 0.33), (0.21, 0.71), (0.15, 0.06))
AP0 = _triple((0.7347, 0.2653), (0.0, 1.0), (0.0001, -0.0770))
AP1 = _triple((0.713, 0.293), (0.165, 0.830), (0.128, 0.044))
ARRI_WIDE_GAMUT_3 = _triple((0.6840, 0.3130), (0.2210, 0.8480), (0.0861, -0.1020))
CIE_RGB = _triple((0.7347, 0.2653), (0.2738, 0.7174), (0.1666, 0.0089))
# The X, Y and Z axes themselves; RGB in this gamut is CIE XYZ.
XYZ_AXES = _triple((1.0, 0.0), (0.0, 1.0), (0.0, 0.0))

KNOWN_GAMUTS: dict[str, ChromaticityTriple] = {
    "bt709": BT709,
    "bt2020": BT2020,
    "p3": P3,
    "adobe_rgb": ADOBE_RGB,
    "ap0": AP0,
    "ap1": AP1,
    "arri_wide_gamut_3": ARRI_WIDE_GAMUT_3,
    "cie_rgb": CIE_RGB,
    "xyz": XYZ_AXES,
}


def _is_xyz_axes(red: Chromaticity, green: Chromaticity, blue: Chromaticity) -> bool:
    return (red, green, blue) == XYZ_AXES


def rgb_to_xyz_matrix(
    red: Chromaticity,
    green: Chromaticity,
    blue: Chromaticity,
    white: WhitePoint,
) -> Mat3:
    """Derive the matrix taking linear RGB in these primaries to CIE XYZ.

    Each primary becomes an XYZ direction (Y = 1); the columns are then scaled
    so RGB (1, 1, 1) lands on the white point tristimulus.

    Raises:
        InvalidPrimariesError: a primary has ``y == 0`` or the three are
            collinear (the direction matrix is singular).
    """

    if _is_xyz_axes(red, green, blue):
        return identity()

    directions = []
    for label, xy in (("red", red), ("green", green), ("blue", blue)):
        d = xy.direction()
        if d is None:
            raise InvalidPrimariesError(f"{label} primary has y == 0: {xy}")
        directions.append(d)

    m = np.column_stack(directions).astype(FLOAT)
    try:
        m_inv = inverse(m, eps=EPSILON)
    except SingularMatrixError as exc:
        raise InvalidPrimariesError(
            f"primaries are collinear or duplicated ({exc}): {red}, {green}, {blue}"
        ) from exc

    s = m_inv @ white.xyz
    return (m * s).astype(FLOAT)


@dataclass(frozen=True)
class Primaries:
    """Red, green and blue chromaticities with their reference white.

    The RGB -> XYZ matrix is derived once at construction. Equality ignores
    ``name``.
    """

    red: Chromaticity
    green: Chromaticity
    blue: Chromaticity
    white: WhitePoint
    name: str | None = field(default=None, compare=False)
    rgb_to_xyz: Mat3 = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        for attr in ("red", "green", "blue"):
            object.__setattr__(self, attr, Chromaticity.coerce(getattr(self, attr)))
        object.__setattr__(self, "white", coerce_white_point(self.white))
        matrix = rgb_to_xyz_matrix(self.red, self.green, self.blue, self.white)
        object.__setattr__(self, "rgb_to_xyz", freeze(matrix))

    @property
    def chromaticities(self) -> ChromaticityTriple:
        return (self.red, self.green, self.blue)

    @property
    def is_xyz(self) -> bool:
        return _is_xyz_axes(self.red, self.green, self.blue)

    @classmethod
    def from_xy(
        cls,
        red: Sequence[float],
        green: Sequence[float],
        blue: Sequence[float],
        white: WhitePoint | str | Sequence[float],
    ) -> Primaries:
        """Build primaries, labelled with a known gamut name when one matches."""

        prim = cls(
            Chromaticity.coerce(red),
            Chromaticity.coerce(green),
            Chromaticity.coerce(blue),
            white,  # type: ignore[arg-type]
        )
        try:
            return prim.canonicalize()
        except CanonicalizationFailedError:
            return prim

    def known_gamut(self) -> str | None:
        for gamut_name, triple in KNOWN_GAMUTS.items():
            if all(a.is_close(b, DETECTION_TOLERANCE) for a, b in zip(self.chromaticities, triple)):
                return gamut_name
        return None

    def canonicalize(self) -> Primaries:
        """Snap to the exact coordinates of the matching known gamut and white point."""

        gamut_name = self.known_gamut()
        if gamut_name is None:
            raise CanonicalizationFailedError(f"no known gamut matches {self.chromaticities}")
        red, green, blue = KNOWN_GAMUTS[gamut_name]
        try:
            white = self.white.canonicalize()
        except CanonicalizationFailedError:
            white = self.white
        return Primaries(red, green, blue, white, name=gamut_name)

    def with_whitepoint(self, white: WhitePoint | str | Sequence[float]) -> Primaries:
        return replace(self, white=coerce_white_point(white))

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "red": self.red.to_list(),
            "green": self.green.to_list(),
            "blue": self.blue.to_list(),
            "white": self.white.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Primaries:
        return cls(
            Chromaticity.coerce(data["red"]),
            Chromaticity.coerce(data["green"]),
            Chromaticity.coerce(data["blue"]),
            coerce_white_point(data["white"]),
            name=data.get("name"),
        )

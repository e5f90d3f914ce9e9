from __future__ import annotations

from dataclasses import dataclass, field
import math
import re
from typing import Any, Sequence

import numpy as np

from .errors import CanonicalizationFailedError, DegenerateWhitePointError
from .linalg import EPSILON, FLOAT, Vec3, freeze


# Tolerance on xy coordinates when matching against a known illuminant.
DETECTION_TOLERANCE = 1e-4


@dataclass(frozen=True)
class Chromaticity:
    x: float
    y: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "x", float(self.x))
        object.__setattr__(self, "y", float(self.y))
        if not (math.isfinite(self.x) and math.isfinite(self.y)):
            raise ValueError(f"chromaticity must be finite, got ({self.x}, {self.y})")

    def direction(self) -> Vec3 | None:
        """XYZ with Y normalized to 1, or ``None`` when ``y`` is near zero."""

        if abs(self.y) < EPSILON:
            return None
        return np.array([self.x / self.y, 1.0, (1.0 - self.x - self.y) / self.y], dtype=FLOAT)

    def is_close(self, other: Chromaticity, tol: float = DETECTION_TOLERANCE) -> bool:
        return abs(self.x - other.x) <= tol and abs(self.y - other.y) <= tol

    def to_list(self) -> list[float]:
        return [self.x, self.y]

    @classmethod
    def coerce(cls, value: Chromaticity | Sequence[float]) -> Chromaticity:
        if isinstance(value, Chromaticity):
            return value
        if len(value) != 2:
            raise ValueError(f"chromaticity needs 2 coordinates, got {list(value)}")
        return cls(float(value[0]), float(value[1]))


@dataclass(frozen=True)
class WhitePoint:
    """Reference white. Compared by chromaticity; ``name`` is only a label."""

    chromaticity: Chromaticity
    name: str | None = field(default=None, compare=False)
    xyz: Vec3 = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        direction = self.chromaticity.direction()
        if direction is None:
            raise DegenerateWhitePointError(
                f"white point y is zero, no tristimulus value: {self.chromaticity}"
            )
        object.__setattr__(self, "xyz", freeze(direction))

    @property
    def x(self) -> float:
        return self.chromaticity.x

    @property
    def y(self) -> float:
        return self.chromaticity.y

    @classmethod
    def from_xy(cls, x: float, y: float) -> WhitePoint:
        """Build a white point, labelled with a known illuminant name when one matches."""

        wp = cls(Chromaticity(x, y))
        try:
            return wp.canonicalize()
        except CanonicalizationFailedError:
            return wp

    def canonicalize(self) -> WhitePoint:
        for known in WHITE_POINTS.values():
            if self.chromaticity.is_close(known.chromaticity):
                return known
        raise CanonicalizationFailedError(f"no known illuminant matches {self.chromaticity}")

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "xy": self.chromaticity.to_list()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> WhitePoint:
        xy = Chromaticity.coerce(data["xy"])
        return cls(xy, name=data.get("name"))


def _wp(name: str, x: float, y: float) -> WhitePoint:
    return WhitePoint(Chromaticity(x, y), name=name)


# CIE 1931 2 degree observer.
A = _wp("a", 0.44757, 0.40745)
B = _wp("b", 0.34842, 0.35161)
C = _wp("c", 0.31006, 0.31616)
D50 = _wp("d50", 0.34567, 0.35850)
D55 = _wp("d55", 0.33242, 0.34743)
D60 = _wp("d60", 0.32168, 0.33767)  # ACES white
D65 = _wp("d65", 0.31270, 0.32900)
D75 = _wp("d75", 0.29902, 0.31485)
DCI = _wp("dci", 0.31400, 0.35100)
E = _wp("e", 1.0 / 3.0, 1.0 / 3.0)
F2 = _wp("f2", 0.37208, 0.37529)
F7 = _wp("f7", 0.31292, 0.32933)
F11 = _wp("f11", 0.38052, 0.37713)

WHITE_POINTS: dict[str, WhitePoint] = {
    wp.name: wp for wp in (A, B, C, D50, D55, D60, D65, D75, DCI, E, F2, F7, F11) if wp.name
}


def _normalize_name(name: str) -> str:
    return re.sub(r"[^a-z0-9]+", "", name.strip().lower())


def get_white_point(name: str) -> WhitePoint:
    key = _normalize_name(name)
    if key == "aces":
        key = "d60"
    if key not in WHITE_POINTS:
        raise ValueError(f"unknown white point: {name!r}")
    return WHITE_POINTS[key]


def coerce_white_point(value: WhitePoint | str | Sequence[float] | dict[str, Any]) -> WhitePoint:
    """Accept a WhitePoint, a known name, ``[x, y]`` or a ``to_dict`` mapping."""

    if isinstance(value, WhitePoint):
        return value
    if isinstance(value, str):
        return get_white_point(value)
    if isinstance(value, dict):
        return WhitePoint.from_dict(value)
    xy = Chromaticity.coerce(value)
    return WhitePoint.from_xy(xy.x, xy.y)

"""Chromatic adaptation between white points (von Kries style)."""

from __future__ import annotations

import enum
import logging

import numpy as np

from .errors import DegenerateWhitePointError
from .linalg import EPSILON, Mat3, diag, freeze, identity, inverse, is_close, mat3, multiply
from .whitepoint import WhitePoint


logger = logging.getLogger(__name__)


_CONE_MATRICES: dict[str, Mat3] = {
    "bradford": freeze(
        mat3(
            [
                [0.8951, 0.2664, -0.1614],
                [-0.7502, 1.7135, 0.0367],
                [0.0389, -0.0685, 1.0296],
            ]
        )
    ),
    # Hunt-Pointer-Estevez, D65 normalized.
    "von_kries": freeze(
        mat3(
            [
                [0.40024, 0.70760, -0.08081],
                [-0.22630, 1.16532, 0.04570],
                [0.00000, 0.00000, 0.91822],
            ]
        )
    ),
    "cat02": freeze(
        mat3(
            [
                [0.7328, 0.4296, -0.1624],
                [-0.7036, 1.6975, 0.0061],
                [0.0030, 0.0136, 0.9834],
            ]
        )
    ),
    "xyz_scaling": freeze(identity()),
}


class LmsConeSpace(str, enum.Enum):
    BRADFORD = "bradford"
    VON_KRIES = "von_kries"
    CAT02 = "cat02"
    XYZ_SCALING = "xyz_scaling"

    @property
    def matrix(self) -> Mat3:
        return _CONE_MATRICES[self.value]

    @classmethod
    def parse(cls, value: LmsConeSpace | str) -> LmsConeSpace:
        if isinstance(value, LmsConeSpace):
            return value
        key = str(value).strip().lower().replace("-", "_").replace(" ", "_")
        try:
            return cls(key)
        except ValueError:
            choices = ", ".join(c.value for c in cls)
            raise ValueError(f"unknown cone space {value!r}; expected one of: {choices}") from None


def adaptation_matrix(
    source: WhitePoint,
    target: WhitePoint,
    cone_space: LmsConeSpace | str = LmsConeSpace.BRADFORD,
) -> Mat3:
    """Matrix mapping XYZ relative to ``source`` white onto ``target`` white.

    Identical white points give exactly the identity matrix.
    """

    if is_close(source.xyz, target.xyz):
        return identity()

    cone = LmsConeSpace.parse(cone_space)
    m = cone.matrix
    src_lms = m @ source.xyz
    dst_lms = m @ target.xyz
    if np.any(np.abs(src_lms) < EPSILON):
        raise DegenerateWhitePointError(
            f"source white {source.chromaticity} has a zero {cone.value} cone response"
        )

    logger.debug(
        "adapting %s -> %s with %s",
        source.name or source.chromaticity,
        target.name or target.chromaticity,
        cone.value,
    )
    return multiply(inverse(m), diag(dst_lms / src_lms), m)

"""Derivation and application of conversions between two color spaces.

A conversion runs in three stages: decode with the source model and transfer
function, one composed 3x3 matrix (source RGB -> XYZ -> adapted XYZ -> target
RGB), then encode with the target transfer function and model. The matrix only
ever sees linear values.
"""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass, field
import logging
import threading
from typing import Any, Sequence

import numpy as np

from .cat import LmsConeSpace, adaptation_matrix
from .linalg import Mat3, Vec3, apply, as_vec3, freeze, identity, inverse, multiply
from .model import ColorModel
from .space import ColorSpace
from .transfer import TransferFunction


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConversionTransform:
    source: ColorSpace
    target: ColorSpace
    matrix: Mat3 = field(repr=False, compare=False)
    cone_space: LmsConeSpace = LmsConeSpace.BRADFORD

    @property
    def source_transfer(self) -> TransferFunction:
        return self.source.transfer

    @property
    def target_transfer(self) -> TransferFunction:
        return self.target.transfer

    @property
    def source_model(self) -> ColorModel:
        return self.source.model

    @property
    def target_model(self) -> ColorModel:
        return self.target.model

    @property
    def is_identity(self) -> bool:
        return bool(np.array_equal(self.matrix, identity()))

    def convert(self, value: Vec3 | Sequence[float]) -> Vec3:
        return convert(self, value)

    def inverse(self) -> ConversionTransform:
        return derive(self.target, self.source, cone_space=self.cone_space)


def linear_matrix(
    source: ColorSpace,
    target: ColorSpace,
    cone_space: LmsConeSpace | str = LmsConeSpace.BRADFORD,
) -> Mat3:
    """Compose source RGB -> XYZ, adaptation and XYZ -> target RGB.

    Raises:
        SingularMatrixError: the target RGB -> XYZ matrix cannot be inverted.
        DegenerateWhitePointError: adaptation hit a zero cone response.
    """

    if source.primaries == target.primaries:
        return identity()

    src_to_xyz = source.rgb_to_xyz
    xyz_to_dst = inverse(target.rgb_to_xyz)
    if source.white_point == target.white_point:
        return multiply(xyz_to_dst, src_to_xyz)
    adapt = adaptation_matrix(source.white_point, target.white_point, cone_space)
    return multiply(xyz_to_dst, adapt, src_to_xyz)


def derive(
    source: ColorSpace,
    target: ColorSpace,
    cone_space: LmsConeSpace | str = LmsConeSpace.BRADFORD,
) -> ConversionTransform:
    cone = LmsConeSpace.parse(cone_space)
    matrix = linear_matrix(source, target, cone)
    logger.debug("derived conversion %s -> %s (%s)", source.name, target.name, cone.value)
    return ConversionTransform(source=source, target=target, matrix=freeze(matrix), cone_space=cone)


def convert(transform: ConversionTransform, value: Vec3 | Sequence[float]) -> Vec3:
    """Convert one color (or any ``(..., 3)`` array) through ``transform``."""

    linear = transform.source.decode(as_vec3(value))
    mixed = apply(transform.matrix, linear)
    return np.asarray(transform.target.encode(mixed))


class ConversionCache:
    """Memoizes derived conversions keyed by the value of their inputs.

    Purely an optimization: a lookup returns the same transform ``derive``
    would build. ``max_entries`` bounds the table, dropping the oldest entry.
    """

    def __init__(self, max_entries: int | None = None) -> None:
        if max_entries is not None and max_entries <= 0:
            raise ValueError(f"max_entries must be positive, got {max_entries}")
        self._max_entries = max_entries
        self._entries: OrderedDict[tuple[ColorSpace, ColorSpace, LmsConeSpace], ConversionTransform] = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def get(
        self,
        source: ColorSpace,
        target: ColorSpace,
        cone_space: LmsConeSpace | str = LmsConeSpace.BRADFORD,
    ) -> ConversionTransform:
        cone = LmsConeSpace.parse(cone_space)
        key = (source, target, cone)
        with self._lock:
            cached = self._entries.get(key)
            if cached is not None:
                self.hits += 1
                logger.debug("conversion cache hit %s -> %s", source.name, target.name)
                return cached

        transform = derive(source, target, cone)
        with self._lock:
            existing = self._entries.get(key)
            if existing is not None:
                self.hits += 1
                return existing
            self.misses += 1
            self._entries[key] = transform
            if self._max_entries is not None and len(self._entries) > self._max_entries:
                self._entries.popitem(last=False)
        return transform

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: Any) -> bool:
        with self._lock:
            return key in self._entries

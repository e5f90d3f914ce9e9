from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

import numpy as np

from .cat import LmsConeSpace
from .conversion import ConversionCache, derive
from .linalg import Vec3, as_vec3, freeze, is_close
from .space import ColorSpace
from .spaces import SRGB


@dataclass(frozen=True, eq=False)
class Color:
    """One 3-component value together with the space it is encoded in.

    Arrays of colors go through :meth:`ConversionTransform.convert` instead.
    """

    value: Vec3
    space: ColorSpace

    def __post_init__(self) -> None:
        value = as_vec3(self.value)
        if value.shape != (3,):
            raise ValueError(f"Color holds a single 3-vector, got shape {value.shape}")
        object.__setattr__(self, "value", freeze(value))

    @classmethod
    def new(cls, x: float, y: float, z: float, space: ColorSpace) -> Color:
        return cls(np.array([x, y, z]), space)

    @classmethod
    def srgb(cls, r: float, g: float, b: float) -> Color:
        return cls.new(r, g, b, SRGB)

    def to(
        self,
        space: ColorSpace,
        cache: ConversionCache | None = None,
        cone_space: LmsConeSpace | str = LmsConeSpace.BRADFORD,
    ) -> Color:
        if space == self.space:
            return Color(self.value, space)
        if cache is not None:
            transform = cache.get(self.space, space, cone_space)
        else:
            transform = derive(self.space, space, cone_space)
        return Color(transform.convert(self.value), space)

    def to_linear(self) -> Color:
        return self.to(self.space.linear())

    def is_close(self, other: Color, eps: float = 1e-6) -> bool:
        return self.space == other.space and is_close(self.value, other.value, eps)

    def tolist(self) -> list[float]:
        return [float(v) for v in self.value]

    def __iter__(self) -> Iterator[float]:
        return iter(self.tolist())

    def __repr__(self) -> str:
        r, g, b = self.tolist()
        return f"Color(({r:.6g}, {g:.6g}, {b:.6g}), space={self.space.name or 'custom'})"


"""3-vector and 3x3-matrix primitives backed by numpy.

Every vector and matrix the engine derives uses :data:`FLOAT`, chosen once per
process from ``RGBSPACE_PRECISION`` (``float64`` unless set to ``float32``).
"""

from __future__ import annotations

import os
from typing import Iterable, Sequence

import numpy as np

from .errors import SingularMatrixError


Vec3 = np.ndarray
Mat3 = np.ndarray

_PRECISIONS: dict[str, type[np.floating]] = {
    "float64": np.float64,
    "f64": np.float64,
    "64": np.float64,
    "float32": np.float32,
    "f32": np.float32,
    "32": np.float32,
}


def _select_precision(raw: str | None) -> type[np.floating]:
    key = (raw or "float64").strip().lower()
    if key not in _PRECISIONS:
        raise ValueError(f"unsupported RGBSPACE_PRECISION {raw!r}; expected float32 or float64")
    return _PRECISIONS[key]


FLOAT: type[np.floating] = _select_precision(os.environ.get("RGBSPACE_PRECISION"))

# Near-zero threshold for determinants, denominators and white point matching.
EPSILON: float = 1e-10 if FLOAT is np.float64 else 1e-6


def vec3(x: float, y: float, z: float) -> Vec3:
    return np.array([x, y, z], dtype=FLOAT)


def as_vec3(value: Sequence[float] | np.ndarray) -> Vec3:
    arr = np.asarray(value, dtype=FLOAT)
    if arr.shape[-1:] != (3,):
        raise ValueError(f"expected 3 components, got shape {arr.shape}")
    return arr


def mat3(rows: Iterable[Iterable[float]]) -> Mat3:
    arr = np.array([list(row) for row in rows], dtype=FLOAT)
    if arr.shape != (3, 3):
        raise ValueError(f"expected a 3x3 matrix, got shape {arr.shape}")
    return arr


def identity() -> Mat3:
    return np.eye(3, dtype=FLOAT)


def diag(v: Vec3) -> Mat3:
    return np.diag(np.asarray(v, dtype=FLOAT))


def dot(a: Vec3, b: Vec3) -> float:
    return float(np.dot(np.asarray(a, dtype=FLOAT), np.asarray(b, dtype=FLOAT)))


def apply(m: Mat3, v: Vec3) -> Vec3:
    """Matrix-vector product, broadcasting over leading axes of ``v``."""

    return np.einsum("ij,...j->...i", m, np.asarray(v, dtype=FLOAT)).astype(FLOAT, copy=False)


def multiply(*ms: Mat3) -> Mat3:
    """Product of ``ms`` in the order given, so ``multiply(a, b, c) == a @ b @ c``."""

    if not ms:
        return identity()
    out = np.asarray(ms[0], dtype=FLOAT)
    for m in ms[1:]:
        out = out @ np.asarray(m, dtype=FLOAT)
    return out.astype(FLOAT, copy=False)


def transpose(m: Mat3) -> Mat3:
    return np.ascontiguousarray(np.asarray(m, dtype=FLOAT).T)


def determinant(m: Mat3) -> float:
    return float(np.linalg.det(np.asarray(m, dtype=FLOAT)))


def inverse(m: Mat3, eps: float = EPSILON) -> Mat3:
    det = determinant(m)
    if not np.isfinite(det) or abs(det) < eps:
        raise SingularMatrixError(f"matrix is not invertible (det={det:.3e})")
    return np.linalg.inv(np.asarray(m, dtype=FLOAT)).astype(FLOAT, copy=False)


def freeze(a: np.ndarray) -> np.ndarray:
    """Return a read-only ``FLOAT`` copy of ``a``."""

    out = np.array(a, dtype=FLOAT, copy=True)
    out.setflags(write=False)
    return out


def is_close(a: np.ndarray, b: np.ndarray, eps: float = EPSILON) -> bool:
    return bool(np.all(np.abs(np.asarray(a, dtype=FLOAT) - np.asarray(b, dtype=FLOAT)) <= eps))

"""Transfer functions between linear light and encoded signal values.

Each curve is a small frozen dataclass carrying only its own parameters; the
module-level :func:`encode` and :func:`decode` dispatch over the closed set of
curves. All curves work per channel on floats or numpy arrays and never clamp:
values outside the nominal domain go through the formula (or its documented
extension) so out-of-gamut colors survive a round trip.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
import math
from typing import Any, ClassVar, Union

import numpy as np

from .linalg import FLOAT


# IEC 61966-2-1 sRGB.
SRGB_LINEAR_CUT = 0.0031308
SRGB_ENCODED_CUT = 0.04045
SRGB_SLOPE = 12.92
SRGB_ALPHA = 1.055
SRGB_GAMMA = 2.4

# ITU-R BT.709 / BT.2020 OETF, full precision constants from BT.2020.
BT709_ALPHA = 1.09929682680944
BT709_BETA = 0.018053968510807
BT709_SLOPE = 4.5
BT709_POWER = 0.45

# SMPTE ST 2084 (PQ).
PQ_M1 = 2610.0 / 16384.0
PQ_M2 = 2523.0 / 4096.0 * 128.0
PQ_C1 = 3424.0 / 4096.0
PQ_C2 = 2413.0 / 4096.0 * 32.0
PQ_C3 = 2392.0 / 4096.0 * 32.0
PQ_PEAK_LUMINANCE = 10000.0
# dY/dE of the PQ EOTF at signal 1.0, used to extend the curve past its peak.
PQ_SLOPE_AT_PEAK = (PQ_C2 - PQ_C1 * PQ_C3) / ((PQ_C2 - PQ_C3) ** 2 * PQ_M1 * PQ_M2)

# ITU-R BT.2100 HLG OETF.
HLG_A = 0.17883277
HLG_B = 1.0 - 4.0 * HLG_A
HLG_C = 0.5 - HLG_A * math.log(4.0 * HLG_A)

# ARRI LogC3 constants for EI800 (SUP 3.x style), normalized signal domain.
_LOGC3_EI800 = {
    "cut": 0.010591,
    "a": 5.555556,
    "b": 0.052272,
    "c": 0.247190,
    "d": 0.385537,
    "e": 5.367655,
    "f": 0.092809,
}


def _arr(value: Any) -> np.ndarray:
    return np.asarray(value, dtype=FLOAT)


def _result(out: np.ndarray) -> Any:
    # 0-d arrays collapse to numpy scalars so scalar callers get scalars back.
    return out.astype(FLOAT, copy=False)[()]


class _Curve:
    kind: ClassVar[str] = ""

    @property
    def is_linear(self) -> bool:
        return False

    def encode(self, linear: Any) -> Any:
        return encode(self, linear)  # type: ignore[arg-type]

    def decode(self, encoded: Any) -> Any:
        return decode(self, encoded)  # type: ignore[arg-type]

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, **asdict(self)}  # type: ignore[call-overload]


@dataclass(frozen=True)
class Linear(_Curve):
    kind: ClassVar[str] = "linear"

    @property
    def is_linear(self) -> bool:
        return True


@dataclass(frozen=True)
class Gamma(_Curve):
    """Pure power curve, mirrored about zero for negative values."""

    kind: ClassVar[str] = "gamma"
    exponent: float = 2.2

    def __post_init__(self) -> None:
        if not math.isfinite(self.exponent) or self.exponent <= 0.0:
            raise ValueError(f"gamma exponent must be positive and finite, got {self.exponent}")


@dataclass(frozen=True)
class Srgb(_Curve):
    kind: ClassVar[str] = "srgb"


@dataclass(frozen=True)
class Bt709(_Curve):
    kind: ClassVar[str] = "bt709"


@dataclass(frozen=True)
class Pq(_Curve):
    """SMPTE ST 2084. A linear value of 1.0 means ``reference_luminance`` cd/m^2."""

    kind: ClassVar[str] = "pq"
    reference_luminance: float = PQ_PEAK_LUMINANCE

    def __post_init__(self) -> None:
        if not math.isfinite(self.reference_luminance) or self.reference_luminance <= 0.0:
            raise ValueError(f"reference_luminance must be positive, got {self.reference_luminance}")


@dataclass(frozen=True)
class Hlg(_Curve):
    kind: ClassVar[str] = "hlg"


@dataclass(frozen=True)
class LogC3(_Curve):
    """ARRI LogC3 at EI800."""

    kind: ClassVar[str] = "logc3"


TransferFunction = Union[Linear, Gamma, Srgb, Bt709, Pq, Hlg, LogC3]

LINEAR = Linear()
SRGB = Srgb()
BT709 = Bt709()
PQ = Pq()
HLG = Hlg()
LOGC3 = LogC3()

_KINDS: dict[str, type] = {cls.kind: cls for cls in (Linear, Gamma, Srgb, Bt709, Pq, Hlg, LogC3)}


def _srgb_encode(x: np.ndarray) -> np.ndarray:
    high = SRGB_ALPHA * np.power(np.maximum(x, SRGB_LINEAR_CUT), 1.0 / SRGB_GAMMA) - (SRGB_ALPHA - 1.0)
    return np.where(x <= SRGB_LINEAR_CUT, SRGB_SLOPE * x, high)


def _srgb_decode(v: np.ndarray) -> np.ndarray:
    high = np.power((np.maximum(v, SRGB_ENCODED_CUT) + (SRGB_ALPHA - 1.0)) / SRGB_ALPHA, SRGB_GAMMA)
    return np.where(v <= SRGB_ENCODED_CUT, v / SRGB_SLOPE, high)


def _bt709_encode(x: np.ndarray) -> np.ndarray:
    high = BT709_ALPHA * np.power(np.maximum(x, BT709_BETA), BT709_POWER) - (BT709_ALPHA - 1.0)
    return np.where(x < BT709_BETA, BT709_SLOPE * x, high)


def _bt709_decode(v: np.ndarray) -> np.ndarray:
    cut = BT709_SLOPE * BT709_BETA
    high = np.power((np.maximum(v, cut) + (BT709_ALPHA - 1.0)) / BT709_ALPHA, 1.0 / BT709_POWER)
    return np.where(v < cut, v / BT709_SLOPE, high)


def _gamma_encode(x: np.ndarray, exponent: float) -> np.ndarray:
    return np.sign(x) * np.power(np.abs(x), 1.0 / exponent)


def _gamma_decode(v: np.ndarray, exponent: float) -> np.ndarray:
    return np.sign(v) * np.power(np.abs(v), exponent)


def _pq_encode(x: np.ndarray, reference_luminance: float) -> np.ndarray:
    y = np.abs(x) * (reference_luminance / PQ_PEAK_LUMINANCE)
    ym1 = np.power(np.minimum(y, 1.0), PQ_M1)
    curve = np.power((PQ_C1 + PQ_C2 * ym1) / (1.0 + PQ_C3 * ym1), PQ_M2)
    above = 1.0 + (y - 1.0) / PQ_SLOPE_AT_PEAK
    return np.sign(x) * np.where(y <= 1.0, curve, above)


def _pq_decode(v: np.ndarray, reference_luminance: float) -> np.ndarray:
    e = np.abs(v)
    ep = np.power(np.minimum(e, 1.0), 1.0 / PQ_M2)
    curve = np.power(np.maximum(ep - PQ_C1, 0.0) / (PQ_C2 - PQ_C3 * ep), 1.0 / PQ_M1)
    above = 1.0 + (e - 1.0) * PQ_SLOPE_AT_PEAK
    y = np.where(e <= 1.0, curve, above)
    return np.sign(v) * y * (PQ_PEAK_LUMINANCE / reference_luminance)


def _hlg_encode(x: np.ndarray) -> np.ndarray:
    e = np.abs(x)
    high = HLG_A * np.log(12.0 * np.maximum(e, 1.0 / 12.0) - HLG_B) + HLG_C
    return np.sign(x) * np.where(e <= 1.0 / 12.0, np.sqrt(3.0 * e), high)


def _hlg_decode(v: np.ndarray) -> np.ndarray:
    e = np.abs(v)
    high = (np.exp((np.maximum(e, 0.5) - HLG_C) / HLG_A) + HLG_B) / 12.0
    return np.sign(v) * np.where(e <= 0.5, e * e / 3.0, high)


def _logc3_encode(x: np.ndarray) -> np.ndarray:
    params = _LOGC3_EI800
    cut = params["cut"]
    high = params["c"] * np.log10(params["a"] * np.maximum(x, cut) + params["b"]) + params["d"]
    low = params["e"] * x + params["f"]
    return np.where(x > cut, high, low)


def _logc3_decode(y: np.ndarray) -> np.ndarray:
    params = _LOGC3_EI800
    cut_y = params["e"] * params["cut"] + params["f"]
    high = (np.power(10.0, (np.maximum(y, cut_y) - params["d"]) / params["c"]) - params["b"]) / params["a"]
    low = (y - params["f"]) / params["e"]
    return np.where(y > cut_y, high, low)


def encode(tf: TransferFunction, linear: Any) -> Any:
    """Apply the curve's encoding (linear light -> signal) per channel."""

    x = _arr(linear)
    match tf:
        case Linear():
            return _result(x)
        case Gamma(exponent=exponent):
            return _result(_gamma_encode(x, exponent))
        case Srgb():
            return _result(_srgb_encode(x))
        case Bt709():
            return _result(_bt709_encode(x))
        case Pq(reference_luminance=luminance):
            return _result(_pq_encode(x, luminance))
        case Hlg():
            return _result(_hlg_encode(x))
        case LogC3():
            return _result(_logc3_encode(x))
        case _:
            raise TypeError(f"not a transfer function: {tf!r}")


def decode(tf: TransferFunction, encoded: Any) -> Any:
    """Apply the curve's decoding (signal -> linear light) per channel."""

    v = _arr(encoded)
    match tf:
        case Linear():
            return _result(v)
        case Gamma(exponent=exponent):
            return _result(_gamma_decode(v, exponent))
        case Srgb():
            return _result(_srgb_decode(v))
        case Bt709():
            return _result(_bt709_decode(v))
        case Pq(reference_luminance=luminance):
            return _result(_pq_decode(v, luminance))
        case Hlg():
            return _result(_hlg_decode(v))
        case LogC3():
            return _result(_logc3_decode(v))
        case _:
            raise TypeError(f"not a transfer function: {tf!r}")


def transfer_from_dict(data: dict[str, Any] | str) -> TransferFunction:
    """Build a curve from ``{"kind": ..., **params}`` or a bare kind name."""

    if isinstance(data, str):
        data = {"kind": data}
    raw = dict(data)
    kind = str(raw.pop("kind", "")).strip().lower()
    cls = _KINDS.get(kind)
    if cls is None:
        raise ValueError(f"unknown transfer function kind: {kind!r}")
    allowed = {f.name for f in fields(cls)}
    unknown = set(raw) - allowed
    if unknown:
        raise ValueError(f"unexpected parameters for {kind}: {sorted(unknown)}")
    return cls(**{k: float(v) for k, v in raw.items()})

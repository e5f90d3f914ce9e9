"""Color models: invertible 3-vector reshapings applied on top of a transfer function.

A space encodes linear light with its transfer function and then with its
model; decoding runs the model inverse first. ``Rgb`` leaves the values
alone. The CIE models, Oklab and Oklch read their input as CIE XYZ and need
the XYZ-axes primaries; ``Ictcp`` reads linear BT.2020 RGB. HSL and HSV work
on any RGB, usually the encoded signal. Hues are in degrees in ``[0, 360)``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Union

import numpy as np

from .linalg import EPSILON, FLOAT, Vec3, apply, freeze, inverse, mat3
from .transfer import PQ


# CIE 1976 L*a*b* / L*u*v* companding.
CIE_DELTA = 6.0 / 29.0
CIE_KAPPA_CUT = CIE_DELTA**3

# Björn Ottosson, "A perceptual color space for image processing" (2020).
OKLAB_XYZ_TO_LMS = freeze(
    mat3(
        [
            [0.8189330101, 0.3618667424, -0.1288597137],
            [0.0329845436, 0.9293118715, 0.0361456387],
            [0.0482003018, 0.2643662691, 0.6338517070],
        ]
    )
)
OKLAB_LMS_TO_LAB = freeze(
    mat3(
        [
            [0.2104542553, 0.7936177850, -0.0040720468],
            [1.9779984951, -2.4285922050, 0.4505937099],
            [0.0259040371, 0.7827717662, -0.8086757660],
        ]
    )
)
OKLAB_LMS_TO_XYZ = freeze(inverse(OKLAB_XYZ_TO_LMS))
OKLAB_LAB_TO_LMS = freeze(inverse(OKLAB_LMS_TO_LAB))

# ITU-R BT.2100 ICtCp, integer coefficients over 4096.
ICTCP_RGB_TO_LMS = freeze(mat3([[1688, 2146, 262], [683, 2951, 462], [99, 309, 3688]]) / 4096.0)
ICTCP_LMS_TO_ICTCP = freeze(mat3([[2048, 2048, 0], [6610, -13613, 7003], [17933, -17390, -543]]) / 4096.0)
ICTCP_LMS_TO_RGB = freeze(inverse(ICTCP_RGB_TO_LMS))
ICTCP_ICTCP_TO_LMS = freeze(inverse(ICTCP_LMS_TO_ICTCP))


def _arr(value: Any) -> np.ndarray:
    out = np.asarray(value, dtype=FLOAT)
    if out.shape[-1:] != (3,):
        raise ValueError(f"expected a 3-vector or (..., 3) array, got shape {out.shape}")
    return out


def _split(v: np.ndarray) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    return v[..., 0], v[..., 1], v[..., 2]


def _stack(a: np.ndarray, b: np.ndarray, c: np.ndarray) -> np.ndarray:
    return np.stack(np.broadcast_arrays(a, b, c), axis=-1).astype(FLOAT, copy=False)


def _safe(den: np.ndarray) -> np.ndarray:
    return np.where(np.abs(den) < EPSILON, 1.0, den)


class _Model:
    kind: ClassVar[str] = ""
    # Gamut name (see ``primaries.KNOWN_GAMUTS``) the model's input must use.
    reference_gamut: ClassVar[str | None] = None

    @property
    def is_identity(self) -> bool:
        return False

    def encode(self, values: Any, white: Vec3) -> np.ndarray:
        return encode(self, values, white)  # type: ignore[arg-type]

    def decode(self, values: Any, white: Vec3) -> np.ndarray:
        return decode(self, values, white)  # type: ignore[arg-type]

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind}


@dataclass(frozen=True)
class Rgb(_Model):
    kind: ClassVar[str] = "rgb"

    @property
    def is_identity(self) -> bool:
        return True


@dataclass(frozen=True)
class Xyy(_Model):
    kind: ClassVar[str] = "xyy"
    reference_gamut: ClassVar[str | None] = "xyz"


@dataclass(frozen=True)
class CieLab(_Model):
    kind: ClassVar[str] = "cie_lab"
    reference_gamut: ClassVar[str | None] = "xyz"


@dataclass(frozen=True)
class CieLch(_Model):
    kind: ClassVar[str] = "cie_lch"
    reference_gamut: ClassVar[str | None] = "xyz"


@dataclass(frozen=True)
class CieLuv(_Model):
    kind: ClassVar[str] = "cie_luv"
    reference_gamut: ClassVar[str | None] = "xyz"


@dataclass(frozen=True)
class Oklab(_Model):
    kind: ClassVar[str] = "oklab"
    reference_gamut: ClassVar[str | None] = "xyz"


@dataclass(frozen=True)
class Oklch(_Model):
    kind: ClassVar[str] = "oklch"
    reference_gamut: ClassVar[str | None] = "xyz"


@dataclass(frozen=True)
class Ictcp(_Model):
    """BT.2100 ICtCp with PQ; linear 1.0 is the PQ reference luminance."""

    kind: ClassVar[str] = "ictcp"
    reference_gamut: ClassVar[str | None] = "bt2020"


@dataclass(frozen=True)
class Hsl(_Model):
    kind: ClassVar[str] = "hsl"


@dataclass(frozen=True)
class Hsv(_Model):
    kind: ClassVar[str] = "hsv"


ColorModel = Union[Rgb, Xyy, CieLab, CieLch, CieLuv, Oklab, Oklch, Ictcp, Hsl, Hsv]

RGB = Rgb()
XYY = Xyy()
CIE_LAB = CieLab()
CIE_LCH = CieLch()
CIE_LUV = CieLuv()
OKLAB = Oklab()
OKLCH = Oklch()
ICTCP = Ictcp()
HSL = Hsl()
HSV = Hsv()

_KINDS: dict[str, ColorModel] = {
    m.kind: m for m in (RGB, XYY, CIE_LAB, CIE_LCH, CIE_LUV, OKLAB, OKLCH, ICTCP, HSL, HSV)
}


def _to_polar(v: np.ndarray) -> np.ndarray:
    lightness, a, b = _split(v)
    hue = np.degrees(np.arctan2(b, a)) % 360.0
    return _stack(lightness, np.hypot(a, b), hue)


def _from_polar(v: np.ndarray) -> np.ndarray:
    lightness, chroma, hue = _split(v)
    h = np.radians(hue)
    return _stack(lightness, chroma * np.cos(h), chroma * np.sin(h))


def _xyz_to_xyy(xyz: np.ndarray, white: Vec3) -> np.ndarray:
    x, y, z = _split(xyz)
    total = x + y + z
    black = np.abs(total) < EPSILON
    wx, wy = white[0] / white.sum(), white[1] / white.sum()
    return _stack(np.where(black, wx, x / _safe(total)), np.where(black, wy, y / _safe(total)), y)


def _xyy_to_xyz(xyy: np.ndarray) -> np.ndarray:
    cx, cy, lum = _split(xyy)
    flat = np.abs(cy) < EPSILON
    scale = np.where(flat, 0.0, lum / _safe(cy))
    return _stack(cx * scale, np.where(flat, 0.0, lum), (1.0 - cx - cy) * scale)


def _lab_f(t: np.ndarray) -> np.ndarray:
    return np.where(t > CIE_KAPPA_CUT, np.cbrt(t), t / (3.0 * CIE_DELTA**2) + 4.0 / 29.0)


def _lab_f_inv(f: np.ndarray) -> np.ndarray:
    return np.where(f > CIE_DELTA, f**3, 3.0 * CIE_DELTA**2 * (f - 4.0 / 29.0))


def _xyz_to_lab(xyz: np.ndarray, white: Vec3) -> np.ndarray:
    fx, fy, fz = _split(_lab_f(xyz / white))
    return _stack(116.0 * fy - 16.0, 500.0 * (fx - fy), 200.0 * (fy - fz))


def _lab_to_xyz(lab: np.ndarray, white: Vec3) -> np.ndarray:
    lightness, a, b = _split(lab)
    fy = (lightness + 16.0) / 116.0
    return _lab_f_inv(_stack(fy + a / 500.0, fy, fy - b / 200.0)) * white


def _uv_prime(xyz: np.ndarray) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    x, y, z = _split(xyz)
    den = x + 15.0 * y + 3.0 * z
    degenerate = np.abs(den) < EPSILON
    return 4.0 * x / _safe(den), 9.0 * y / _safe(den), degenerate


def _xyz_to_luv(xyz: np.ndarray, white: Vec3) -> np.ndarray:
    un, vn, _ = _uv_prime(white)
    u, v, degenerate = _uv_prime(xyz)
    lightness = 116.0 * _lab_f(xyz[..., 1] / white[1]) - 16.0
    u_star = np.where(degenerate, 0.0, 13.0 * lightness * (u - un))
    v_star = np.where(degenerate, 0.0, 13.0 * lightness * (v - vn))
    return _stack(lightness, u_star, v_star)


def _luv_to_xyz(luv: np.ndarray, white: Vec3) -> np.ndarray:
    un, vn, _ = _uv_prime(white)
    lightness, u_star, v_star = _split(luv)
    y = _lab_f_inv((lightness + 16.0) / 116.0) * white[1]
    dark = np.abs(lightness) < EPSILON
    u = u_star / _safe(13.0 * lightness) + un
    v = v_star / _safe(13.0 * lightness) + vn
    x = np.where(dark, 0.0, y * 9.0 * u / _safe(4.0 * v))
    z = np.where(dark, 0.0, y * (12.0 - 3.0 * u - 20.0 * v) / _safe(4.0 * v))
    return _stack(x, np.where(dark, 0.0, y), z)


def _xyz_to_oklab(xyz: np.ndarray) -> np.ndarray:
    return apply(OKLAB_LMS_TO_LAB, np.cbrt(apply(OKLAB_XYZ_TO_LMS, xyz)))


def _oklab_to_xyz(lab: np.ndarray) -> np.ndarray:
    return apply(OKLAB_LMS_TO_XYZ, apply(OKLAB_LAB_TO_LMS, lab) ** 3)


def _rgb_to_ictcp(rgb: np.ndarray) -> np.ndarray:
    lms = np.asarray(PQ.encode(apply(ICTCP_RGB_TO_LMS, rgb)), dtype=FLOAT)
    return apply(ICTCP_LMS_TO_ICTCP, lms)


def _ictcp_to_rgb(ictcp: np.ndarray) -> np.ndarray:
    lms = np.asarray(PQ.decode(apply(ICTCP_ICTCP_TO_LMS, ictcp)), dtype=FLOAT)
    return apply(ICTCP_LMS_TO_RGB, lms)


def _hue(rgb: np.ndarray, hi: np.ndarray, chroma: np.ndarray) -> np.ndarray:
    r, g, b = _split(rgb)
    c = _safe(chroma)
    sector = np.where(hi == r, ((g - b) / c) % 6.0, np.where(hi == g, (b - r) / c + 2.0, (r - g) / c + 4.0))
    return np.where(np.abs(chroma) < EPSILON, 0.0, sector * 60.0)


def _rgb_to_hsv(rgb: np.ndarray) -> np.ndarray:
    hi = rgb.max(axis=-1)
    chroma = hi - rgb.min(axis=-1)
    sat = np.where(np.abs(hi) < EPSILON, 0.0, chroma / _safe(hi))
    return _stack(_hue(rgb, hi, chroma), sat, hi)


def _hsv_to_rgb(hsv: np.ndarray) -> np.ndarray:
    hue, sat, val = _split(hsv)

    def channel(n: float) -> np.ndarray:
        k = (n + hue / 60.0) % 6.0
        return val - val * sat * np.clip(np.minimum(k, 4.0 - k), 0.0, 1.0)

    return _stack(channel(5.0), channel(3.0), channel(1.0))


def _rgb_to_hsl(rgb: np.ndarray) -> np.ndarray:
    hi = rgb.max(axis=-1)
    lo = rgb.min(axis=-1)
    chroma = hi - lo
    light = (hi + lo) / 2.0
    den = np.minimum(light, 1.0 - light)
    sat = np.where(np.abs(den) < EPSILON, 0.0, (hi - light) / _safe(den))
    return _stack(_hue(rgb, hi, chroma), sat, light)


def _hsl_to_rgb(hsl: np.ndarray) -> np.ndarray:
    hue, sat, light = _split(hsl)
    a = sat * np.minimum(light, 1.0 - light)

    def channel(n: float) -> np.ndarray:
        k = (n + hue / 30.0) % 12.0
        return light - a * np.clip(np.minimum(k - 3.0, 9.0 - k), -1.0, 1.0)

    return _stack(channel(0.0), channel(8.0), channel(4.0))


def encode(model: ColorModel, values: Any, white: Vec3) -> np.ndarray:
    """Reshape (transfer-encoded) values into ``model``; ``white`` is the space's white XYZ."""

    v = _arr(values)
    match model:
        case Rgb():
            return v
        case Xyy():
            return _xyz_to_xyy(v, white)
        case CieLab():
            return _xyz_to_lab(v, white)
        case CieLch():
            return _to_polar(_xyz_to_lab(v, white))
        case CieLuv():
            return _xyz_to_luv(v, white)
        case Oklab():
            return _xyz_to_oklab(v)
        case Oklch():
            return _to_polar(_xyz_to_oklab(v))
        case Ictcp():
            return _rgb_to_ictcp(v)
        case Hsl():
            return _rgb_to_hsl(v)
        case Hsv():
            return _rgb_to_hsv(v)
        case _:
            raise TypeError(f"not a color model: {model!r}")


def decode(model: ColorModel, values: Any, white: Vec3) -> np.ndarray:
    """Inverse of :func:`encode`."""

    v = _arr(values)
    match model:
        case Rgb():
            return v
        case Xyy():
            return _xyy_to_xyz(v)
        case CieLab():
            return _lab_to_xyz(v, white)
        case CieLch():
            return _lab_to_xyz(_from_polar(v), white)
        case CieLuv():
            return _luv_to_xyz(v, white)
        case Oklab():
            return _oklab_to_xyz(v)
        case Oklch():
            return _oklab_to_xyz(_from_polar(v))
        case Ictcp():
            return _ictcp_to_rgb(v)
        case Hsl():
            return _hsl_to_rgb(v)
        case Hsv():
            return _hsv_to_rgb(v)
        case _:
            raise TypeError(f"not a color model: {model!r}")


def model_from_dict(data: dict[str, Any] | str) -> ColorModel:
    kind = data if isinstance(data, str) else data.get("kind", "")
    model = _KINDS.get(str(kind).strip().lower())
    if model is None:
        raise ValueError(f"unknown color model kind: {kind!r}")
    return model

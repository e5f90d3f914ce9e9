from __future__ import annotations

import os
from pathlib import Path
import subprocess
import sys
import textwrap

import numpy as np
import pytest

import rgbspace
from rgbspace.linalg import _select_precision


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (None, np.float64),
        ("", np.float64),
        ("float64", np.float64),
        ("F32", np.float32),
        (" float32 ", np.float32),
    ],
)
def test_select_precision(raw: str | None, expected: type) -> None:
    assert _select_precision(raw) is expected


def test_select_precision_rejects_unknown() -> None:
    with pytest.raises(ValueError):
        _select_precision("float16")


_FLOAT32_SCRIPT = textwrap.dedent(
    """
    import numpy as np

    from rgbspace import spaces
    from rgbspace.color import Color
    from rgbspace.conversion import derive
    from rgbspace.linalg import EPSILON, FLOAT
    from rgbspace.transfer import HLG, SRGB

    assert FLOAT is np.float32, FLOAT
    assert EPSILON == 1e-6

    value = np.array([0.2, 0.5, 0.8])
    for target in (spaces.ACES_CG, spaces.BT_2100_PQ, spaces.OKLAB, spaces.CIE_LAB, spaces.ICTCP_PQ):
        forward = derive(spaces.SRGB, target)
        out = forward.convert(value)
        assert out.dtype == np.float32, (target.name, out.dtype)
        back = forward.inverse().convert(out)
        assert np.allclose(back, value, atol=1e-4), (target.name, back)

    assert abs(float(SRGB.decode(0.04045)) - 0.04045 / 12.92) < 1e-4
    assert abs(float(HLG.decode(0.5)) - 1.0 / 12.0) < 1e-4
    white = Color.srgb(1.0, 1.0, 1.0).to(spaces.CIE_XYZ)
    assert np.allclose(white.value, spaces.CIE_XYZ.white_point.xyz, atol=1e-4)
    print("ok")
    """
)


def test_float32_build_converts_within_tolerance() -> None:
    src_dir = Path(rgbspace.__file__).resolve().parent.parent
    env = dict(os.environ)
    env["RGBSPACE_PRECISION"] = "float32"
    env["PYTHONPATH"] = os.pathsep.join(p for p in (str(src_dir), env.get("PYTHONPATH", "")) if p)

    result = subprocess.run(
        [sys.executable, "-c", _FLOAT32_SCRIPT],
        env=env,
        capture_output=True,
        text=True,
        timeout=120,
    )
    assert result.returncode == 0, result.stderr
    assert result.stdout.strip() == "ok"

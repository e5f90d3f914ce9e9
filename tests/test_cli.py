from __future__ import annotations

import json
from pathlib import Path

import numpy as np
import pytest

from rgbspace.cli import main
from rgbspace.whitepoint import D65


def test_convert_json(capsys: pytest.CaptureFixture[str]) -> None:
    rc = main(["convert", "srgb", "cie_xyz", "1", "1", "1", "--json"])
    assert rc == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["source"] == "srgb"
    assert payload["target"] == "cie_xyz"
    assert np.allclose(payload["output"], D65.xyz, atol=1e-6)


def test_convert_text(capsys: pytest.CaptureFixture[str]) -> None:
    rc = main(["convert", "ACEScg", "sRGB", "0.18", "0.18", "0.18"])
    assert rc == 0
    out = capsys.readouterr().out.splitlines()
    assert out[0].startswith("acescg (0.180000")
    assert out[1].startswith("srgb (")


def test_matrix_json_identity(capsys: pytest.CaptureFixture[str]) -> None:
    rc = main(["matrix", "display_p3", "Display P3", "--json"])
    assert rc == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["matrix"] == [[1.0, 0.0, 0.0], [0.0, 1.0, 0.0], [0.0, 0.0, 1.0]]
    assert payload["source_transfer"] == {"kind": "srgb"}


def test_matrix_text_with_cone_space(capsys: pytest.CaptureFixture[str]) -> None:
    rc = main(["matrix", "srgb", "acescg", "--cone-space", "von_kries"])
    assert rc == 0
    out = capsys.readouterr().out
    assert "(von_kries)" in out
    assert "decode: srgb" in out
    assert "encode: linear" in out


def test_spaces_lists_config_spaces(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text(
        "log_level: WARNING\nspaces:\n  grading:\n    base: acescg\n    transfer: logc3\n",
        encoding="utf-8",
    )
    rc = main(["spaces", "--config", str(cfg_file), "--json"])
    assert rc == 0
    payload = json.loads(capsys.readouterr().out)
    assert "acescg" in payload["builtin"]
    assert payload["custom"]["grading"]["transfer"] == {"kind": "logc3"}


def test_unknown_space_returns_error(capsys: pytest.CaptureFixture[str]) -> None:
    rc = main(["convert", "nope", "srgb", "0", "0", "0"])
    assert rc == 1
    assert "unknown color space" in capsys.readouterr().err


def test_convert_into_lab(capsys: pytest.CaptureFixture[str]) -> None:
    rc = main(["convert", "srgb", "Lab", "1", "1", "1", "--json"])
    assert rc == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["target"] == "cie_lab"
    assert np.allclose(payload["output"], [100.0, 0.0, 0.0], atol=1e-4)


def test_matrix_reports_model_steps(capsys: pytest.CaptureFixture[str]) -> None:
    rc = main(["matrix", "hsv", "oklab"])
    assert rc == 0
    out = capsys.readouterr().out
    assert "model decode: hsv" in out
    assert "model encode: oklab" in out

    rc = main(["matrix", "srgb", "oklab", "--json"])
    assert rc == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["source_model"] == {"kind": "rgb"}
    assert payload["target_model"] == {"kind": "oklab"}

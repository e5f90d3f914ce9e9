from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest

from rgbspace.cat import LmsConeSpace
from rgbspace.config import AppConfig, load_config
from rgbspace.conversion import ConversionCache, derive
from rgbspace.errors import UnknownColorSpaceError
from rgbspace.model import CIE_LAB, HSV
from rgbspace.spaces import ACES_CG, SRGB
from rgbspace.transfer import Gamma
from rgbspace.whitepoint import D65


def _write(tmp_path: Path, text: str) -> Path:
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text(text, encoding="utf-8")
    return cfg_file


def test_load_config_with_custom_spaces(tmp_path: Path) -> None:
    cfg_file = _write(
        tmp_path,
        """
log_level: DEBUG
log_file: ./logs/rgbspace.log
engine:
  cone_space: cat02
  cache_max_entries: 8
spaces:
  studio_monitor:
    primaries:
      red: [0.70, 0.29]
      green: [0.17, 0.79]
      blue: [0.13, 0.05]
    white_point: d65
    transfer: {kind: gamma, exponent: 2.4}
  acescg_d65:
    base: ACEScg
    white_point: [0.3127, 0.3290]
""",
    )

    cfg = load_config(cfg_file)
    assert cfg.log_level == "DEBUG"
    assert cfg.log_file == (tmp_path / "logs" / "rgbspace.log").resolve()
    assert cfg.engine.cone_space is LmsConeSpace.CAT02
    assert cfg.engine.cache_max_entries == 8

    monitor = cfg.lookup_space("Studio Monitor")
    assert monitor.name == "studio_monitor"
    assert monitor.transfer == Gamma(2.4)
    assert monitor.primaries.name is None
    assert np.allclose(monitor.rgb_to_xyz @ np.ones(3), D65.xyz)

    moved = cfg.lookup_space("acescg_d65")
    assert moved.primaries.chromaticities == ACES_CG.primaries.chromaticities
    assert moved.white_point == D65
    assert not derive(ACES_CG, moved).is_identity


def test_lookup_falls_back_to_registry() -> None:
    cfg = AppConfig()
    assert cfg.lookup_space("srgb") is SRGB
    with pytest.raises(UnknownColorSpaceError):
        cfg.lookup_space("nonexistent")


def test_make_cache_follows_engine_settings(tmp_path: Path) -> None:
    assert isinstance(AppConfig().make_cache(), ConversionCache)
    cfg = load_config(_write(tmp_path, "engine:\n  cache_conversions: false\n"))
    assert cfg.make_cache() is None


def test_empty_config_uses_defaults(tmp_path: Path) -> None:
    cfg = load_config(_write(tmp_path, ""))
    assert cfg.engine.cone_space is LmsConeSpace.BRADFORD
    assert cfg.log_file is None
    assert len(cfg.spaces) == 0


@pytest.mark.parametrize(
    "body",
    [
        "spaces:\n  bad:\n    base: srgb\n    transfer: {kind: cineon}\n",
        "spaces:\n  bad:\n    base: no_such_space\n",
        "spaces:\n  bad:\n    primaries: {red: [0.64, 0.33], green: [0.3, 0.6], blue: [0.15, 0.06]}\n",
        "spaces:\n  bad:\n    primaries: {red: [0.0, 0.0], green: [0.5, 0.0], blue: [1.0, 0.0]}\n    white_point: d65\n",
        "engine:\n  cone_space: cat16\n",
        "engine:\n  cache_max_entries: 0\n",
        "engine:\n  cache_max_entries: lots\n",
        "engine: fast\n",
        "spaces:\n  - srgb\n",
        "- srgb\n- acescg\n",
        "spaces:\n  bad:\n    primaries: [0.64, 0.33]\n    white_point: d65\n",
        "spaces:\n  bad:\n    base: srgb\n    model: cmyk\n",
        "spaces:\n  bad:\n    base: srgb\n    model: cie_lab\n",
    ],
)
def test_invalid_config_is_rejected(tmp_path: Path, body: str) -> None:
    with pytest.raises(ValueError):
        load_config(_write(tmp_path, body))


@pytest.mark.parametrize(
    ("body", "key"),
    [
        ("engine:\n  cone_space: cat16\n", "engine.cone_space"),
        ("engine: [bradford]\n", "engine"),
        ("spaces:\n  - srgb\n", "spaces"),
        ("spaces:\n  bad:\n    base: srgb\n    model: cie_lab\n", "spaces.bad"),
    ],
)
def test_invalid_config_names_the_key(tmp_path: Path, body: str, key: str) -> None:
    with pytest.raises(ValueError, match=key.replace(".", r"\.")):
        load_config(_write(tmp_path, body))


def test_custom_space_with_model(tmp_path: Path) -> None:
    cfg = load_config(
        _write(
            tmp_path,
            "spaces:\n"
            "  lab_d55:\n"
            "    base: cie_lab\n"
            "    white_point: d55\n"
            "  srgb_hsv:\n"
            "    base: srgb\n"
            "    model: hsv\n",
        )
    )
    lab = cfg.lookup_space("lab_d55")
    assert lab.model is CIE_LAB
    assert lab.white_point.name == "d55"
    hsv = cfg.lookup_space("srgb_hsv")
    assert hsv.model is HSV
    assert hsv.transfer == SRGB.transfer

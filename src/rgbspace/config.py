from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

from rgbspace.cat import LmsConeSpace
from rgbspace.conversion import ConversionCache
from rgbspace.model import model_from_dict
from rgbspace.primaries import Primaries
from rgbspace.space import ColorSpace
from rgbspace.spaces import get_space, normalize_space_name
from rgbspace.transfer import transfer_from_dict
from rgbspace.whitepoint import coerce_white_point


@dataclass
class EngineConfig:
    cone_space: LmsConeSpace = LmsConeSpace.BRADFORD
    cache_conversions: bool = True
    cache_max_entries: int | None = 256


@dataclass
class AppConfig:
    engine: EngineConfig = field(default_factory=EngineConfig)
    spaces: Mapping[str, ColorSpace] = field(default_factory=lambda: MappingProxyType({}))
    log_level: str = "INFO"
    log_file: Path | None = None

    def lookup_space(self, name: str) -> ColorSpace:
        """Custom spaces from the config file shadow the built-in registry."""

        key = normalize_space_name(name)
        if key in self.spaces:
            return self.spaces[key]
        return get_space(name)

    def make_cache(self) -> ConversionCache | None:
        if not self.engine.cache_conversions:
            return None
        return ConversionCache(max_entries=self.engine.cache_max_entries)


def _expand_path(value: str | None, base: Path) -> Path | None:
    if value in (None, ""):
        return None
    path = Path(value)
    if not path.is_absolute():
        path = (base / path).resolve()
    return path


def _require(data: dict[str, Any], key: str, where: str) -> Any:
    if key not in data:
        raise ValueError(f"missing required config key: {where}.{key}")
    return data[key]


def _parse_space(name: str, raw: dict[str, Any], known: dict[str, ColorSpace]) -> ColorSpace:
    where = f"spaces.{name}"
    if not isinstance(raw, dict):
        raise ValueError(f"{where} must be a mapping")

    try:
        if "base" in raw:
            base_name = str(raw["base"])
            base_key = normalize_space_name(base_name)
            base = known[base_key] if base_key in known else get_space(base_name)
            primaries = base.primaries
            transfer = base.transfer
            model = base.model
        else:
            prim_raw = _require(raw, "primaries", where)
            if not isinstance(prim_raw, dict):
                raise ValueError("primaries must be a mapping")
            primaries = Primaries.from_xy(
                _require(prim_raw, "red", f"{where}.primaries"),
                _require(prim_raw, "green", f"{where}.primaries"),
                _require(prim_raw, "blue", f"{where}.primaries"),
                _require(raw, "white_point", where),
            )
            transfer = transfer_from_dict("linear")
            model = model_from_dict("rgb")

        if "white_point" in raw:
            primaries = primaries.with_whitepoint(coerce_white_point(raw["white_point"]))
        if "transfer" in raw:
            transfer = transfer_from_dict(raw["transfer"])
        if "model" in raw:
            model = model_from_dict(raw["model"])
        return ColorSpace(primaries, transfer, model, name=normalize_space_name(name))
    except ValueError as exc:
        raise ValueError(f"{where}: {exc}") from exc
    except (TypeError, KeyError) as exc:
        raise ValueError(f"{where}: invalid definition ({exc})") from exc


def _section(raw: dict[str, Any], key: str) -> dict[str, Any]:
    value = raw.get(key) or {}
    if not isinstance(value, dict):
        raise ValueError(f"{key} must be a mapping")
    return value


def load_config(path: str | Path) -> AppConfig:
    try:
        import yaml  # type: ignore
    except Exception as exc:
        raise RuntimeError("PyYAML is required for config loading. Install with: pip install PyYAML") from exc

    cfg_path = Path(path).expanduser().resolve()
    with cfg_path.open("r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"config root must be a mapping: {cfg_path}")

    base = cfg_path.parent
    engine_raw = _section(raw, "engine")
    spaces_raw = _section(raw, "spaces")

    try:
        cone_space = LmsConeSpace.parse(engine_raw.get("cone_space", "bradford"))
    except ValueError as exc:
        raise ValueError(f"engine.cone_space: {exc}") from exc

    max_entries = engine_raw.get("cache_max_entries", 256)
    try:
        cache_max_entries = int(max_entries) if max_entries is not None else None
    except (TypeError, ValueError) as exc:
        raise ValueError(f"engine.cache_max_entries must be an integer, got {max_entries!r}") from exc
    if cache_max_entries is not None and cache_max_entries <= 0:
        raise ValueError("engine.cache_max_entries must be positive")

    engine = EngineConfig(
        cone_space=cone_space,
        cache_conversions=bool(engine_raw.get("cache_conversions", True)),
        cache_max_entries=cache_max_entries,
    )

    spaces: dict[str, ColorSpace] = {}
    for name, space_raw in spaces_raw.items():
        key = normalize_space_name(str(name))
        spaces[key] = _parse_space(str(name), space_raw, spaces)

    return AppConfig(
        engine=engine,
        spaces=MappingProxyType(spaces),
        log_level=str(raw.get("log_level", "INFO")),
        log_file=_expand_path(raw.get("log_file"), base),
    )

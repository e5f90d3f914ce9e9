from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any

from rgbspace.config import AppConfig, load_config
from rgbspace.conversion import ConversionTransform, derive
from rgbspace.space import ColorSpace
from rgbspace.spaces import SPACES
from rgbspace.utils.formatting import format_matrix, format_vector
from rgbspace.utils.logging_utils import configure_logging


logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="rgbspace")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log matrix derivations at DEBUG")
    sub = parser.add_subparsers(dest="command", required=True)

    convert = sub.add_parser("convert", help="Convert one color value between two spaces")
    convert.add_argument("source", help="Source space name")
    convert.add_argument("target", help="Target space name")
    convert.add_argument("values", nargs=3, type=float, metavar="V", help="Three channel values")
    convert.add_argument("--cone-space", default=None, help="Chromatic adaptation cone space")
    convert.add_argument("--config", default=None, help="Optional YAML config with custom spaces")
    convert.add_argument("--json", action="store_true", help="Emit machine-readable JSON")

    matrix = sub.add_parser("matrix", help="Print the linear conversion matrix between two spaces")
    matrix.add_argument("source", help="Source space name")
    matrix.add_argument("target", help="Target space name")
    matrix.add_argument("--cone-space", default=None, help="Chromatic adaptation cone space")
    matrix.add_argument("--config", default=None, help="Optional YAML config with custom spaces")
    matrix.add_argument("--json", action="store_true", help="Emit machine-readable JSON")

    spaces = sub.add_parser("spaces", help="List known color spaces")
    spaces.add_argument("--config", default=None, help="Optional YAML config with custom spaces")
    spaces.add_argument("--json", action="store_true", help="Emit machine-readable JSON")

    return parser


def _load(args: argparse.Namespace) -> AppConfig:
    config = load_config(args.config) if args.config else AppConfig()
    configure_logging(config.log_level, config.log_file, package_level="DEBUG" if args.verbose else None)
    return config


def _derive(config: AppConfig, args: argparse.Namespace) -> ConversionTransform:
    source = config.lookup_space(args.source)
    target = config.lookup_space(args.target)
    cone_space = args.cone_space or config.engine.cone_space
    cache = config.make_cache()
    if cache is not None:
        return cache.get(source, target, cone_space)
    return derive(source, target, cone_space=cone_space)


def _matrix_rows(transform: ConversionTransform) -> list[list[float]]:
    return [[float(v) for v in row] for row in transform.matrix]


def _cmd_convert(args: argparse.Namespace) -> int:
    config = _load(args)
    transform = _derive(config, args)
    out = transform.convert(args.values)
    logger.info("converted %s from %s to %s", args.values, args.source, args.target)

    if args.json:
        payload: dict[str, Any] = {
            "source": transform.source.name,
            "target": transform.target.name,
            "input": [float(v) for v in args.values],
            "output": [float(v) for v in out],
        }
        print(json.dumps(payload, indent=2))
        return 0

    print(f"{transform.source.name} {format_vector(args.values)}")
    print(f"{transform.target.name} {format_vector(out)}")
    return 0


def _cmd_matrix(args: argparse.Namespace) -> int:
    config = _load(args)
    transform = _derive(config, args)

    if args.json:
        payload = {
            "source": transform.source.name,
            "target": transform.target.name,
            "cone_space": transform.cone_space.value,
            "source_transfer": transform.source_transfer.to_dict(),
            "target_transfer": transform.target_transfer.to_dict(),
            "source_model": transform.source_model.to_dict(),
            "target_model": transform.target_model.to_dict(),
            "matrix": _matrix_rows(transform),
        }
        print(json.dumps(payload, indent=2))
        return 0

    print(f"{transform.source.name} -> {transform.target.name} ({transform.cone_space.value})")
    if not transform.source_model.is_identity:
        print(f"model decode: {transform.source_model.kind}")
    print(f"decode: {transform.source_transfer.kind}")
    print("matrix:")
    print(format_matrix(_matrix_rows(transform)))
    print(f"encode: {transform.target_transfer.kind}")
    if not transform.target_model.is_identity:
        print(f"model encode: {transform.target_model.kind}")
    return 0


def _print_spaces(title: str, spaces: dict[str, ColorSpace]) -> None:
    print(title)
    for name, space in spaces.items():
        gamut = space.primaries.name or "custom"
        white = space.white_point.name or "custom"
        transfer = space.transfer.kind
        model = space.model.kind
        print(f"  {name:<20} gamut={gamut:<18} white={white:<5} transfer={transfer:<7} model={model}")


def _cmd_spaces(args: argparse.Namespace) -> int:
    config = _load(args)
    builtin = dict(SPACES)
    custom = dict(config.spaces)

    if args.json:
        payload = {
            "builtin": {name: space.to_dict() for name, space in builtin.items()},
            "custom": {name: space.to_dict() for name, space in custom.items()},
        }
        print(json.dumps(payload, indent=2))
        return 0

    _print_spaces("Built-in spaces:", builtin)
    if custom:
        _print_spaces("Config spaces:", custom)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        if args.command == "convert":
            return _cmd_convert(args)
        if args.command == "matrix":
            return _cmd_matrix(args)
        if args.command == "spaces":
            return _cmd_spaces(args)

        parser.error(f"unknown command: {args.command}")
        return 2
    except Exception as exc:
        logger.exception("fatal error")
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())

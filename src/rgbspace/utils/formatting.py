from __future__ import annotations

from typing import Iterable, Sequence


def format_vector(values: Iterable[float], precision: int = 6) -> str:
    return "(" + ", ".join(f"{float(v):.{precision}f}" for v in values) + ")"


def format_matrix(rows: Sequence[Iterable[float]], precision: int = 8, indent: str = "  ") -> str:
    lines = []
    for row in rows:
        cells = [f"{float(v):>{precision + 4}.{precision}f}" for v in row]
        lines.append(f"{indent}[{', '.join(cells)}]")
    return "\n".join(lines)

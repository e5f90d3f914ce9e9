from __future__ import annotations

from rgbspace.utils.formatting import format_matrix, format_vector


def test_format_vector() -> None:
    assert format_vector([1, 0.5, -0.25], precision=3) == "(1.000, 0.500, -0.250)"


def test_format_matrix_one_line_per_row() -> None:
    text = format_matrix([[1, 0, 0], [0, 1, 0], [0, 0, 1]], precision=2)
    lines = text.splitlines()
    assert len(lines) == 3
    assert lines[0] == "  [  1.00,   0.00,   0.00]"

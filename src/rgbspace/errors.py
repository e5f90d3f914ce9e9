from __future__ import annotations


class ColorError(ValueError):
    pass


class InvalidPrimariesError(ColorError):
    pass


class DegenerateWhitePointError(ColorError):
    pass


class SingularMatrixError(ColorError):
    pass


class CanonicalizationFailedError(ColorError):
    pass


class UnknownColorSpaceError(ColorError, KeyError):
    def __str__(self) -> str:
        # KeyError quotes its message; keep the plain text.
        return str(self.args[0]) if self.args else ""


class IncompatibleModelError(ColorError):
    pass

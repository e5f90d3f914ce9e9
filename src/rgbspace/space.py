from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Sequence

from .errors import IncompatibleModelError
from .linalg import Mat3
from .model import RGB, ColorModel, model_from_dict
from .primaries import Primaries
from .transfer import LINEAR, TransferFunction, transfer_from_dict
from .whitepoint import WhitePoint


@dataclass(frozen=True)
class ColorSpace:
    """A color space: primaries with their white point, a transfer function and a model.

    Encoding runs the transfer function, then the model; decoding runs them
    in reverse. Two spaces with equal primaries, white point, transfer
    function and model are equal (and hash equal) whatever their names.

    Raises:
        IncompatibleModelError: the model needs different primaries, e.g.
            CIE Lab over anything but the XYZ axes.
    """

    primaries: Primaries
    transfer: TransferFunction = LINEAR
    model: ColorModel = RGB
    name: str | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        required = self.model.reference_gamut
        if required is not None and self.primaries.known_gamut() != required:
            raise IncompatibleModelError(
                f"{self.model.kind} model needs {required} primaries, got {self.primaries.name or 'custom'}"
            )

    @property
    def white_point(self) -> WhitePoint:
        return self.primaries.white

    @property
    def rgb_to_xyz(self) -> Mat3:
        return self.primaries.rgb_to_xyz

    @property
    def is_linear(self) -> bool:
        return self.transfer.is_linear and self.model.is_identity

    def linear(self) -> ColorSpace:
        """The same primaries and white point without a transfer function or model."""

        if self.is_linear:
            return self
        return ColorSpace(self.primaries, LINEAR, name=f"linear_{self.name}" if self.name else None)

    def with_whitepoint(self, white: WhitePoint | str | Sequence[float]) -> ColorSpace:
        return ColorSpace(self.primaries.with_whitepoint(white), self.transfer, self.model)

    def with_transfer(self, transfer: TransferFunction) -> ColorSpace:
        return ColorSpace(self.primaries, transfer, self.model)

    def with_model(self, model: ColorModel) -> ColorSpace:
        return ColorSpace(self.primaries, self.transfer, model)

    def renamed(self, name: str | None) -> ColorSpace:
        return replace(self, name=name)

    def encode(self, linear: Any) -> Any:
        encoded = self.transfer.encode(linear)
        if self.model.is_identity:
            return encoded
        return self.model.encode(encoded, self.white_point.xyz)

    def decode(self, encoded: Any) -> Any:
        if not self.model.is_identity:
            encoded = self.model.decode(encoded, self.white_point.xyz)
        return self.transfer.decode(encoded)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "primaries": self.primaries.to_dict(),
            "transfer": self.transfer.to_dict(),
            "model": self.model.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ColorSpace:
        return cls(
            Primaries.from_dict(data["primaries"]),
            transfer_from_dict(data.get("transfer", "linear")),
            model_from_dict(data.get("model", "rgb")),
            name=data.get("name"),
        )

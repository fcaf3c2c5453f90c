"""Normalized records shared by the provider clients and the pipeline."""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional, Union

Number = Union[int, float, str]


def parse_decimal(value: Number) -> float:
    """Parse a number that may use a comma as its decimal separator."""
    if isinstance(value, (int, float)):
        return float(value)
    text = str(value).strip().replace(",", ".")
    if not text:
        raise ValueError("empty numeric value")
    return float(text)


def _format_degrees(value: float) -> str:
    # Fixed-point, never exponent notation; 7 decimals is about 1 cm.
    text = format(value, ".7f").rstrip("0")
    if text.endswith("."):
        text += "0"
    return text


@dataclass(frozen=True)
class Coordinate:
    latitude: float
    longitude: float

    @classmethod
    def parse(cls, latitude: Number, longitude: Number) -> "Coordinate":
        return cls(latitude=parse_decimal(latitude), longitude=parse_decimal(longitude))

    def as_param(self) -> str:
        return f"{_format_degrees(self.latitude)},{_format_degrees(self.longitude)}"


@dataclass(frozen=True)
class Candidate:
    name: str
    place_id: str
    open_now: bool = False


@dataclass(frozen=True)
class WalkingLeg:
    distance_text: str
    duration_text: str


@dataclass(frozen=True)
class RestaurantRecord:
    name: str
    rating: Optional[float]
    website: Optional[str]
    distance_text: str
    duration_text: str

    def to_row(self) -> Dict[str, Any]:
        return asdict(self)

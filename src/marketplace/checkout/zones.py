"""Delivery zones for Yenagoa, Bayelsa.

Each landmark belongs to one numbered zone with a flat delivery fee in NGN.
Lookups ignore case and surrounding whitespace.
"""

from dataclasses import dataclass

from protean.exceptions import ValidationError

DELIVERY_STATE = "Bayelsa"
DELIVERY_CITY = "Yenagoa"


@dataclass(frozen=True)
class Landmark:
    name: str
    zone: int
    fee: float


LANDMARKS: tuple[Landmark, ...] = (
    # Zone 1
    Landmark("Azikoro", 1, 1500.0),
    Landmark("Swali", 1, 1500.0),
    Landmark("Prosco", 1, 1500.0),
    Landmark("Kpansia", 1, 1500.0),
    Landmark("Yenezuegene", 1, 1500.0),
    # Zone 2
    Landmark("Ekeki", 2, 1000.0),
    Landmark("Amarata", 2, 1000.0),
    Landmark("Ovom", 2, 1000.0),
    Landmark("Biogbolo", 2, 1000.0),
    Landmark("Opolo", 2, 1000.0),
    # Zone 3
    Landmark("Etegwe", 3, 1500.0),
    Landmark("Tombia", 3, 1500.0),
    Landmark("Edepie", 3, 1500.0),
    Landmark("Agudama", 3, 1500.0),
    Landmark("Akenfa", 3, 1500.0),
    # Zone 4
    Landmark("Yenegwe", 4, 2000.0),
    Landmark("Okaki", 4, 2000.0),
    Landmark("Igbogene", 4, 2000.0),
)

_BY_NAME = {landmark.name.lower(): landmark for landmark in LANDMARKS}


def landmark_info(name: str | None) -> Landmark | None:
    if not name:
        return None
    return _BY_NAME.get(name.strip().lower())


def fee_for(name: str | None) -> float:
    """Delivery fee for a landmark, 0 when the landmark is unknown."""
    landmark = landmark_info(name)
    return landmark.fee if landmark else 0.0


def zone_for(name: str | None) -> int | None:
    landmark = landmark_info(name)
    return landmark.zone if landmark else None


def require_landmark(name: str) -> Landmark:
    landmark = landmark_info(name)
    if landmark is None:
        raise ValidationError({"delivery_landmark": [f"Unknown delivery landmark '{name}'"]})
    return landmark


def available_landmarks() -> list[str]:
    return sorted(landmark.name for landmark in LANDMARKS)


def landmarks_by_zone() -> dict[int, list[str]]:
    grouped: dict[int, list[str]] = {}
    for landmark in LANDMARKS:
        grouped.setdefault(landmark.zone, []).append(landmark.name)
    return grouped

"""Malware strains and their propagation characteristics."""

from __future__ import annotations

from enum import Enum


class Strain(str, Enum):
    """Malware archetype governing how fast an infection spreads."""

    VIRUS = "virus"
    WORM = "worm"
    TROJAN = "trojan"

    @classmethod
    def parse(cls, value: str | Strain) -> Strain:
        """Return the strain named by *value* (case-insensitive)."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            valid = ", ".join(s.value for s in cls)
            raise ValueError(f"Unknown strain '{value}', expected one of: {valid}") from None

    @property
    def label(self) -> str:
        return self.value.capitalize()


# Worms spread fastest, trojans slowest.
DEFAULT_MULTIPLIERS: dict[Strain, float] = {
    Strain.WORM: 1.5,
    Strain.VIRUS: 0.8,
    Strain.TROJAN: 0.5,
}

STRAIN_COLORS: dict[Strain, str] = {
    Strain.VIRUS: "#EF4444",
    Strain.WORM: "#F59E0B",
    Strain.TROJAN: "#3B82F6",
}

STRAIN_ICONS: dict[Strain, str] = {
    Strain.VIRUS: "🦠",
    Strain.WORM: "🐛",
    Strain.TROJAN: "🐴",
}

STRAIN_DESCRIPTIONS: dict[Strain, str] = {
    Strain.VIRUS: "Infects files locally and spreads when files are shared or executed.",
    Strain.WORM: "Self-replicates across networks rapidly without user interaction.",
    Strain.TROJAN: "Disguised as legitimate software, activates malicious payload later.",
}

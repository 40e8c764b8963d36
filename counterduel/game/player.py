from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Player:
    """A contestant. ``speed`` is the tick interval of the player's counter in ms."""

    name: str
    vitality: int
    speed: int
    strength: int

    def decrease_vitality(self, amount: int) -> None:
        self.vitality = max(0, self.vitality - amount)

    def decrease_speed(self, amount: int) -> None:
        self.speed = max(0, self.speed - amount)

    def decrease_strength(self, amount: int) -> None:
        self.strength = max(0, self.strength - amount)

    @property
    def alive(self) -> bool:
        return self.vitality > 0

    def describe(self) -> str:
        return f"{self.name} (Vitality={self.vitality}, Speed={self.speed}, Strength={self.strength})"

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Sequence

from counterduel.common.errors import GameLogicError
from counterduel.counter.engine import MAX_VALUE
from counterduel.game.player import Player

PENALTY_SPEED = 0
PENALTY_STRENGTH = 1


def generate_targets(count: int, rng: random.Random | None = None) -> list[int]:
    rng = rng or random.Random()
    return [rng.randint(0, MAX_VALUE) for _ in range(count)]


def penalty_options(amount: int) -> list[str]:
    return [f"-{amount} speed", f"-{amount} strength"]


@dataclass(frozen=True)
class RoundResult:
    scores: tuple[int, int]
    winner_idx: int | None
    loser_idx: int | None
    damage: int

    @property
    def draw(self) -> bool:
        return self.winner_idx is None


class Match:
    """Vitality bookkeeping for a two-player game."""

    def __init__(self, players: Sequence[Player], penalty_amount: int = 5) -> None:
        if len(players) != 2:
            raise GameLogicError(f"A match needs exactly 2 players, got {len(players)}")
        self.players = list(players)
        self.penalty_amount = penalty_amount
        self.round = 1
        self.knockout_winner_idx: int | None = None

    @property
    def over(self) -> bool:
        if self.knockout_winner_idx is not None:
            return True
        return not all(player.alive for player in self.players)

    def resolve_round(self, score_a: int, score_b: int) -> RoundResult:
        if score_a == score_b:
            return RoundResult((score_a, score_b), None, None, 0)
        winner_idx, loser_idx = (0, 1) if score_a > score_b else (1, 0)
        damage = abs(score_a - score_b)
        self.players[loser_idx].decrease_vitality(damage)
        return RoundResult((score_a, score_b), winner_idx, loser_idx, damage)

    def needs_penalty(self, result: RoundResult) -> bool:
        return result.loser_idx is not None and self.players[result.loser_idx].alive

    def apply_penalty(self, winner_idx: int, loser_idx: int, choice: int) -> bool:
        """Apply the winner's chosen penalty. Returns True on a speed knockout."""
        loser = self.players[loser_idx]
        if choice == PENALTY_SPEED:
            loser.decrease_speed(self.penalty_amount)
            if loser.speed == 0:
                self.knockout_winner_idx = winner_idx
                return True
            return False
        if choice == PENALTY_STRENGTH:
            loser.decrease_strength(self.penalty_amount)
            return False
        raise GameLogicError(f"Unknown penalty choice: {choice}")

    def next_round(self) -> None:
        self.round += 1

    def winner(self) -> Player | None:
        if self.knockout_winner_idx is not None:
            return self.players[self.knockout_winner_idx]
        if not self.over:
            return None
        return self.players[0] if self.players[0].alive else self.players[1]

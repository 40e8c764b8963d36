from __future__ import annotations

import logging
import random
import time
from typing import Callable

from counterduel.counter.engine import CounterEngine
from counterduel.counter.observer import observe
from counterduel.game.player import Player
from counterduel.game.rounds import Match, RoundResult, generate_targets, penalty_options
from counterduel.game.scoring import base_score, calculate_average_score, calculate_score, circular_distance

from .config_utils import DuelSettings
from .console import Console


class DuelGame:
    """Runs one game: rounds of two turns each until a player is out."""

    def __init__(
        self,
        settings: DuelSettings,
        console: Console,
        logger: logging.Logger,
        rng: random.Random | None = None,
        engine_factory: Callable[[], CounterEngine] | None = None,
    ) -> None:
        self.settings = settings
        self.console = console
        self.logger = logger
        self.rng = rng or random.Random(settings.seed)
        self.engine_factory = engine_factory or (lambda: CounterEngine(logger=self.logger))
        players = [
            Player(settings.name1, settings.vitality, settings.speed, settings.strength),
            Player(settings.name2, settings.vitality, settings.speed, settings.strength),
        ]
        self.match = Match(players, penalty_amount=settings.penalty_amount)

    @property
    def players(self) -> list[Player]:
        return self.match.players

    def run(self) -> Player:
        self.console.print_heading("Game Start", 1)
        self.logger.info("Game start: %s vs %s", self.players[0].describe(), self.players[1].describe())

        while not self.match.over:
            round_no = self.match.round
            self.console.print_heading(f"Round {round_no}", 2)
            score_a = self.play_turn(0)
            score_b = self.play_turn(1)
            self.process_round_result(score_a, score_b)
            self.console.print_heading(f"END of Round {round_no}", 2)
            self.match.next_round()

        self.console.print_heading("Game Over", 1)
        winner = self.match.winner()
        self.console.line(f"Winner: {winner.name}")
        self.logger.info("Game over after %d rounds: winner=%s", self.match.round - 1, winner.name)
        return winner

    def play_turn(self, player_idx: int) -> int:
        player = self.players[player_idx]
        self.console.line(
            f"{player.name}'s turn (Vitality={player.vitality}, Speed={player.speed}, Strength={player.strength})"
        )
        targets = generate_targets(self.settings.objectives, self.rng)
        self.console.line(f"→ Objectives: {targets}")
        self.console.line("→ Press ENTER to start the turn..")
        self.console.wait_for_enter()

        scores = [self.play_objective(player, target) for target in targets]
        average = calculate_average_score(scores)

        self.console.line("# End of turn #")
        self.console.line(f"→ Average score: {average}")
        self.logger.info("Turn finished: player=%s scores=%s average=%d", player.name, scores, average)
        return average

    def play_objective(self, player: Player, target: int) -> int:
        engine = self.engine_factory()
        self.console.write("Press ENTER to stop the counter...")
        engine.start(player.speed)
        observer = None
        try:
            observer = observe(
                engine,
                target,
                self.console.renderer(),
                poll_interval_ms=self.settings.observer_poll_ms,
                logger=self.logger,
            )
            self.console.wait_for_enter()
        finally:
            value, miss = engine.stop()
            if observer is not None:
                observer.join()
            engine.join()

        self.console.clear_previous_line()
        if self.settings.result_pause_ms > 0:
            time.sleep(self.settings.result_pause_ms / 1000.0)

        base = base_score(circular_distance(target, value))
        score = calculate_score(target, value, player.strength, miss)
        self.console.line(
            f"→ Objective {target}: Miss = {miss} | Counter = {value} "
            f"// Score = ({base} + {player.strength}) / {miss + 1} = {score}"
        )

        ticks = engine.ticks.snapshot()
        frames = observer.frames.snapshot()
        self.logger.debug(
            "Objective %d: value=%d miss=%d score=%d ticks=%d (%.1fHz) frames=%d (%.1fHz)",
            target,
            value,
            miss,
            score,
            ticks["total"],
            ticks["rate_hz"],
            frames["total"],
            frames["rate_hz"],
        )
        return score

    def process_round_result(self, score_a: int, score_b: int) -> RoundResult:
        result = self.match.resolve_round(score_a, score_b)
        if result.draw:
            self.console.line("The round is a draw. No vitality lost.")
            self.logger.info("Round %d: draw at %d", self.match.round, score_a)
            return result

        winner = self.players[result.winner_idx]
        loser = self.players[result.loser_idx]
        self.console.line(f"{winner.name} wins the round. {loser.name} loses {result.damage} vitality points.")
        self.logger.info(
            "Round %d: winner=%s damage=%d loser_vitality=%d",
            self.match.round,
            winner.name,
            result.damage,
            loser.vitality,
        )

        if self.match.needs_penalty(result):
            self.apply_penalty(result.winner_idx, result.loser_idx)
        return result

    def apply_penalty(self, winner_idx: int, loser_idx: int) -> None:
        winner = self.players[winner_idx]
        loser = self.players[loser_idx]
        self.console.line(f"{winner.name}, you must choose which poison to apply to {loser.name}:")
        options = penalty_options(self.match.penalty_amount)
        choice = self.console.get_user_choice("Choose a penalty:", options)
        knockout = self.match.apply_penalty(winner_idx, loser_idx, choice)

        if choice == 0:
            self.console.line(f"{loser.name}'s speed reduced by {self.match.penalty_amount}!")
        else:
            self.console.line(f"{loser.name}'s strength reduced by {self.match.penalty_amount}!")
        self.logger.info("Penalty applied: %s -> %s (%s)", winner.name, loser.name, options[choice])

        if knockout:
            self.console.line(f"Game Over! {loser.name} has lost because their speed reached 0!")

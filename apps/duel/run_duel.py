from __future__ import annotations

import argparse
import logging
import random
import sys
from pathlib import Path


def _add_repo_to_path() -> Path:
    repo_root = Path(__file__).resolve().parents[2]
    if str(repo_root) not in sys.path:
        sys.path.insert(0, str(repo_root))
    return repo_root


repo_root = _add_repo_to_path()

from apps.duel.config_utils import build_settings, load_config, merge_overrides  # noqa: E402
from apps.duel.console import Console  # noqa: E402
from apps.duel.game import DuelGame  # noqa: E402
from apps.duel.logging_utils import setup_logging  # noqa: E402
from counterduel.common.errors import DuelError  # noqa: E402

DEFAULT_CONFIG = Path("configs/duel.yaml")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Counter duel: a two-player terminal game played with ENTER")
    parser.add_argument("--config", help="Config file (default: configs/duel.yaml if present)")
    parser.add_argument("--name1", help="Name of player 1")
    parser.add_argument("--name2", help="Name of player 2")
    parser.add_argument("--vitality", help="Starting vitality for both players")
    parser.add_argument("--speed", help="Starting speed (counter tick in ms) for both players")
    parser.add_argument("--strength", help="Starting strength for both players")
    parser.add_argument("--objectives", help="Number of targets per turn")
    parser.add_argument("--log-level", help="Log level (DEBUG, INFO, ...)")
    parser.add_argument("--seed", type=int, help="Seed for target generation")
    return parser


def resolve_config(config_arg: str | None) -> dict:
    if config_arg is None:
        config_path = (repo_root / DEFAULT_CONFIG).resolve()
        if not config_path.exists():
            return {}
        return load_config(config_path)

    config_path = Path(config_arg)
    if not config_path.is_absolute():
        config_path = config_path.resolve()
    return load_config(config_path)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        file_config = resolve_config(args.config)
    except (OSError, DuelError) as exc:
        print(f"Failed to load config: {exc}", file=sys.stderr)
        return 1

    config = merge_overrides(
        file_config,
        {
            "players": {"name1": args.name1, "name2": args.name2},
            "attributes": {"vitality": args.vitality, "speed": args.speed, "strength": args.strength},
            "turn": {"objectives": args.objectives},
            "logging": {"level": args.log_level},
        },
    )
    # Value fallbacks are reported before handlers exist; they reach stderr.
    settings = build_settings(config, logging.getLogger("duel"), seed=args.seed)
    logger = setup_logging(settings.log_level, settings.log_dir)
    logger.info("Settings: %s", settings)

    console = Console()
    rng = random.Random(settings.seed)
    try:
        while True:
            DuelGame(settings, console, logger, rng=rng).run()
            if not console.confirm("Start a new game?"):
                break
    except KeyboardInterrupt:
        console.line()
        logger.info("Interrupted by user")
        return 130
    except EOFError:
        console.line()
        logger.info("Input closed, exiting")
        return 0
    except DuelError as exc:
        console.line()
        logger.error("Game aborted: %s", exc)
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())

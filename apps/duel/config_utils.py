from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import yaml

from counterduel.common.errors import ConfigError

DEFAULTS: dict = {
    "players": {"name1": "Player 1", "name2": "Player 2"},
    "attributes": {"vitality": 50, "speed": 50, "strength": 50},
    "turn": {"objectives": 5, "observer_poll_ms": 30, "result_pause_ms": 50},
    "penalty": {"amount": 5},
    "logging": {"level": "INFO", "dir": "logs"},
}

# Values that must be strictly positive for a counter run to start.
_POSITIVE = {("attributes", "speed"), ("turn", "objectives"), ("turn", "observer_poll_ms")}


@dataclass
class DuelSettings:
    name1: str
    name2: str
    vitality: int
    speed: int
    strength: int
    objectives: int
    observer_poll_ms: int
    result_pause_ms: int
    penalty_amount: int
    log_level: str
    log_dir: Path
    seed: int | None = None


def load_config(path: Path) -> dict:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError("Config must be a mapping")
    return data


def _int_setting(config: dict, section: str, key: str, logger: logging.Logger) -> int:
    default = DEFAULTS[section][key]
    raw = (config.get(section) or {}).get(key, default)
    try:
        value = int(raw)
    except (TypeError, ValueError):
        logger.error("Invalid %s value %r, using default of %d", key, raw, default)
        return default
    if value < 0 or (value == 0 and (section, key) in _POSITIVE):
        logger.error("Invalid %s value %d, using default of %d", key, value, default)
        return default
    return value


def merge_overrides(config: dict, overrides: dict) -> dict:
    """Return a copy of ``config`` with non-None ``{section: {key: value}}`` overrides applied."""
    merged = {section: dict(values or {}) for section, values in config.items() if isinstance(values, dict)}
    for section, values in overrides.items():
        for key, value in values.items():
            if value is not None:
                merged.setdefault(section, {})[key] = value
    return merged


def build_settings(config: dict, logger: logging.Logger, seed: int | None = None) -> DuelSettings:
    players = config.get("players") or {}
    log_cfg = config.get("logging") or {}
    return DuelSettings(
        name1=str(players.get("name1", DEFAULTS["players"]["name1"])),
        name2=str(players.get("name2", DEFAULTS["players"]["name2"])),
        vitality=_int_setting(config, "attributes", "vitality", logger),
        speed=_int_setting(config, "attributes", "speed", logger),
        strength=_int_setting(config, "attributes", "strength", logger),
        objectives=_int_setting(config, "turn", "objectives", logger),
        observer_poll_ms=_int_setting(config, "turn", "observer_poll_ms", logger),
        result_pause_ms=_int_setting(config, "turn", "result_pause_ms", logger),
        penalty_amount=_int_setting(config, "penalty", "amount", logger),
        log_level=str(log_cfg.get("level", DEFAULTS["logging"]["level"])),
        log_dir=Path(log_cfg.get("dir", DEFAULTS["logging"]["dir"])),
        seed=seed,
    )

from __future__ import annotations


class DuelError(Exception):
    """Base class for errors raised by the duel packages."""


class CounterStartError(DuelError):
    """The increment loop thread could not be spawned."""


class ObserverError(DuelError):
    """The live render loop failed; raised when the observer is joined."""


class GameLogicError(DuelError):
    pass


class ConfigError(DuelError, ValueError):
    pass

"""Exception types raised by the engine.

Contract errors (``NotAdjacentError``, ``NoMatchError`` and the ``IndexError``
raised by :class:`~ghostmatch.components.grid.Grid`) signal caller bugs.
``BoardStabilizationError`` is raised when a bounded retry loop gives up.
"""
from contextlib import contextmanager
from typing import Iterator

from pydantic import ValidationError


class ConfigError(ValueError):
    """Engine configuration that can never produce a playable board."""


class AlphabetError(ConfigError):
    """Token alphabet too small or malformed."""


class NotAdjacentError(ValueError):
    """A swap was requested between two cells that are not orthogonal neighbours."""

    def __init__(self, a, b):
        super().__init__(f"Cells {a} and {b} are not adjacent")
        self.a = a
        self.b = b


class NoMatchError(ValueError):
    """Cascade resolution was requested on a grid without any match."""


class BoardStabilizationError(RuntimeError):
    """A generation, reshuffle or cascade retry ceiling was exceeded."""


@contextmanager
def config_errors(source: str = "configuration") -> Iterator[None]:
    """Re-raise pydantic validation failures as :class:`ConfigError`.

    A ``ConfigError`` raised by a validator (``AlphabetError`` included) is
    re-raised as-is so callers can still tell alphabet problems apart.
    """
    try:
        yield
    except ValidationError as exc:
        for error in exc.errors():
            cause = (error.get("ctx") or {}).get("error")
            if isinstance(cause, ConfigError):
                raise cause from exc
        raise ConfigError(f"invalid {source}: {exc}") from exc

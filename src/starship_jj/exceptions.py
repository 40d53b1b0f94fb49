"""Exception hierarchy for starship-jj.

All errors raised by this package derive from StarshipJjError.  A fact that
simply has no value (no working-copy commit, no bookmark nearby, no parent to
diff against) is never an exception: it is modelled as ``None``.
"""

from __future__ import annotations


class StarshipJjError(Exception):
    """Base exception for all starship-jj errors."""


class EngineError(StarshipJjError):
    """The version-control engine failed to answer a query.

    Raised for corrupt or unreadable stores, invalid revsets, missing objects
    and failing ``jj`` invocations.  Always propagated: rendering aborts and
    output already written stays on the stream.
    """

    def __init__(self, message: str, *, command: list[str] | None = None) -> None:
        super().__init__(message)
        self.command = command


class ConfigurationError(StarshipJjError):
    """Configuration could not be read or validated.

    Raised before rendering starts.
    """

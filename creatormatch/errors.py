"""
Creator Match - Errors
Every failure a match can surface to the user. The class name is the
error kind reported in failed match results.
"""


class MatchError(Exception):
    """Base class for failures that end a match attempt."""

    @property
    def kind(self) -> str:
        return type(self).__name__

    @property
    def message(self) -> str:
        return str(self)


class InvalidUrl(MatchError):
    """Empty or malformed website URL."""


class InvalidCategory(MatchError):
    """Category outside the canonical taxonomy."""


class RosterUnavailable(MatchError):
    """Every roster source failed. Message is the last source's error."""


class RosterEmpty(MatchError):
    """Roster loaded but held zero usable rows."""


class ClassificationFailed(MatchError):
    """Classifier errored or answered with an unrecognized category."""


class RosterSourceError(Exception):
    """A single roster transport failed (request, payload or columns)."""

"""Exception types raised by the roster engine."""

from __future__ import annotations


class TierlistError(Exception):
    """Base class for roster errors."""


class NotFound(TierlistError):
    """A name or position did not resolve to an item."""


class EmptyInput(TierlistError):
    """No identifying input was given; treated as a cancel."""


class NoChange(TierlistError):
    """The requested move would leave the item where it is."""


class StoreError(TierlistError):
    """A tier file could not be read or parsed."""


class RestoreError(TierlistError):
    """Restoring a batch snapshot failed; manual recovery is required."""

"""Errors raised by roster operations. All are reported to the user, never fatal."""


class RosterError(Exception):
    """Base class for every roster failure the user can act on."""


class ValidationError(RosterError):
    """A required field (player name, selected player, date) is missing or invalid."""


class DuplicateError(RosterError):
    """A player with that name already exists."""


class NotFoundError(RosterError):
    """The operation referenced an unknown player or match id."""


class CorruptStoreError(RosterError):
    """The persisted roster exists but cannot be decoded into a valid roster."""

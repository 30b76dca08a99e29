"""Exceptions raised by the curation layer. The classifier core raises none."""


class MemoryCoreError(Exception):
    """Base class for MemoryCore errors."""


class VagueMemoryError(MemoryCoreError, ValueError):
    """Raised when an edited memory is too vague to keep."""


class DuplicateMemoryError(MemoryCoreError, ValueError):
    """Raised when an edited memory restates one that is already stored."""


class UnknownMemoryError(MemoryCoreError, KeyError):
    """Raised when the record being edited does not exist."""

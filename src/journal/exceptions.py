"""Journal exceptions

Design Reference: DESIGN.md (Error handling)
"""


class JournalError(Exception):
    """Base class for journal errors"""

    pass


class PersistenceError(JournalError):
    """The persisted slot could not be read or written (quota, I/O, serialization)."""

    pass


class ImportFormatError(JournalError):
    """Imported text is not a JSON array of journal entries."""

    pass

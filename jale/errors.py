"""Exception types raised by the Jale core."""


class JaleError(Exception):
    """Base class for Jale errors."""


class InvalidInputError(JaleError, ValueError):
    """A profile or job posting cannot be scored (no comparable attributes)."""


class PersistenceError(JaleError, RuntimeError):
    """The record store failed to read or write a record."""


class RecordNotFoundError(PersistenceError):
    """A record addressed by id does not exist."""

    def __init__(self, collection: str, record_id: str) -> None:
        super().__init__(f"No record with id={record_id} in '{collection}'")
        self.collection = collection
        self.record_id = record_id

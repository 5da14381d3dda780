"""Error taxonomy shared by the leaderboard and statistics services."""


class ScoresError(Exception):
    """Base class for all score-service failures."""


class ValidationError(ScoresError):
    """Malformed input rejected before any storage access.

    Carries every problem found, not just the first one.
    """

    def __init__(self, errors: list[str] | str) -> None:
        self.errors = [errors] if isinstance(errors, str) else list(errors)
        super().__init__("; ".join(self.errors))


class PersistenceConflictError(ScoresError):
    """A row key collided again after the bounded regeneration retry."""


class StorageUnavailableError(ScoresError):
    """The backing table store could not be reached or failed mid-operation."""


class EntityExistsError(ScoresError):
    """Insert rejected because the (partition, row) key is already taken."""

    def __init__(self, partition_key: str, row_key: str) -> None:
        self.partition_key = partition_key
        self.row_key = row_key
        super().__init__(f"Entity '{partition_key}/{row_key}' already exists")

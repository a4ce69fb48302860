"""Error taxonomy shared by every layer."""


class SpaceLearnError(Exception):
    """Base class for all SpaceLearn errors."""


class ValidationError(SpaceLearnError):
    """Malformed input, rejected before any store mutation."""


class NotFound(SpaceLearnError):
    """An operation targeted an unknown entry."""

    def __init__(self, entry_id: str):
        super().__init__(f"Entry not found: {entry_id}")
        self.entry_id = entry_id


class StoreUnavailable(SpaceLearnError):
    """The durable entry store could not be reached or refused the write."""

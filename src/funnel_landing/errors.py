"""Exceptions raised at the collaborator boundaries."""


class SourceUnavailableError(RuntimeError):
    """The CRM data source could not deliver a complete listing."""


class InvalidWeightError(ValueError):
    """A weight outside [0, 1] was offered to a store."""

    def __init__(self, code: str, weight: object):
        super().__init__(f"Weight for {code!r} must be between 0 and 1, got {weight!r}")
        self.code = code
        self.weight = weight


class CacheUnavailableError(RuntimeError):
    """The snapshot cache could not be read or written."""

class ValidationError(ValueError):
    """Template fields violate an invariant. Shown to the user as form feedback."""


class UnsupportedFrequency(ValueError):
    """A frequency with no schedule (e.g. 'one-time') reached the calendar."""

    def __init__(self, frequency):
        super().__init__(f"Unsupported frequency: {frequency!r}")
        self.frequency = frequency


class StoreError(Exception):
    """Transient failure of a transaction or template store."""

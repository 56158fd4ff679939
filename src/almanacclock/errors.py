"""Error taxonomy for ring computations."""


class AlmanacClockError(Exception):
    """Base error."""


class InvalidInputError(AlmanacClockError, ValueError):
    """Raised when a month/day, phase, or event range is out of its domain."""


class InvalidLocationError(InvalidInputError):
    """Raised when latitude or longitude is outside its valid range."""

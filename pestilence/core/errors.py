"""Engine exceptions."""


class PestilenceError(Exception):
    """Base class for engine errors."""


class LevelConfigError(PestilenceError):
    """Raised when level data does not match the level schema."""


class PathInvariantError(PestilenceError):
    """Raised when a reached goal cannot be unwound back to the path start."""

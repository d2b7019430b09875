class GolfLeagueError(Exception):
    """Base for engine and persistence errors."""


class InvalidInputError(GolfLeagueError, ValueError):
    """Wrong-length hole arrays, bad stroke indexes, non-positive slope."""


class CourseConfigurationError(InvalidInputError):
    """Malformed course data (duplicate stroke indexes, wrong hole count)."""


class InsufficientHistoryError(GolfLeagueError):
    """No differentials at all: the caller must use the provisional handicap."""


class NotFoundError(GolfLeagueError):
    pass


class ConflictError(GolfLeagueError):
    """Write rejected because the record is already final."""

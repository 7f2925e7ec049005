"""Exceptions raised by the tournament system."""


class TournamentError(Exception):
    """Base exception for all tournament errors."""

    pass


class ValidationFailure(TournamentError, ValueError):
    """Raised when an operation's precondition does not hold.

    The message is meant for the end user. State is never modified when this
    is raised.
    """

    pass


class MatchNotFoundError(TournamentError, LookupError):
    """Raised when a result targets a match id that does not exist."""

    def __init__(self, match_id: int):
        super().__init__(f"Match {match_id} not found")
        self.match_id = match_id


# ========== Import Exceptions ==========


class SnapshotError(TournamentError):
    """Base exception for rejected tournament imports."""

    pass


class MalformedSnapshotError(SnapshotError):
    """Raised when import content is not parseable JSON."""

    pass


class InvalidSnapshotError(SnapshotError):
    """Raised when import content parses but is not a tournament export."""

    pass

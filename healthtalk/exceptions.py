
class RelayError(Exception):
    """Base class for failures rendered to the client as ``{"error": ...}``."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ChatValidationError(RelayError):
    """The request body cannot be dispatched (no turns, empty last turn, bad schema)."""

    status_code = 400


class UpstreamUnavailable(RelayError):
    """The provider could not be reached, refused the call, or sent an unreadable body."""

    status_code = 500

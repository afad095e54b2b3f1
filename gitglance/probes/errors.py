from typing import Optional

class ProbeError(Exception):
    """Base class for GitHub fetch failures. `message` is what the user sees."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

class NotFound(ProbeError):
    pass

class RateLimited(ProbeError):
    pass

class TransportError(ProbeError):
    pass

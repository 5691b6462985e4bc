class HintServerException(Exception):
    """Base class for all errors raised by the hint server."""

    def __init__(self, message: str = None):
        self.message = message
        super().__init__(message)

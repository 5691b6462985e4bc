from hint_server.exceptions import hint_server_exception


class StartupException(hint_server_exception.HintServerException):
    """Raised when the server cannot start, e.g. a bad flag or no home directory."""

from enum import IntEnum


class StatusCode(IntEnum):
    """
    Outcome of interpreting one command line.

    Handlers may return any int: 0 is success and anything else is a
    handler-reported failure. The remaining members are produced by the
    interpreter itself and never by a handler. BUSY marks a command dropped
    because the worker queue was full.
    """
    NONE = -1
    BUSY = -2
    SUCCESS = 0
    FAILURE = 1
    TOO_MANY_TOKENS = 124
    INVALID_QUOTE = 125
    INVALID_ESCAPE = 126
    NOT_FOUND = 127

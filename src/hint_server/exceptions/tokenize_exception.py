from hint_server.exceptions import hint_server_exception
from hint_server.status import StatusCode


class TokenizeException(hint_server_exception.HintServerException):
    status = StatusCode.FAILURE


class TooManyTokensException(TokenizeException):
    status = StatusCode.TOO_MANY_TOKENS

    def __init__(self, max_tokens: int):
        self.max_tokens = max_tokens
        super().__init__(f"Max number of {max_tokens} tokens exceeded!")


class InvalidQuoteException(TokenizeException):
    status = StatusCode.INVALID_QUOTE

    def __init__(self):
        super().__init__("Unclosed quotation mark!")


class InvalidEscapeException(TokenizeException):
    status = StatusCode.INVALID_ESCAPE

    def __init__(self, char: str = None):
        self.char = char
        super().__init__("Invalid escape sequence!")

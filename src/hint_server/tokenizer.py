"""
Shell-like tokenizer for command lines received over the network.

Splits one line of untrusted text into a bounded list of tokens:

- Whitespace outside quotes separates tokens.
- A double quote toggles quoting; inside quotes whitespace is literal.
  Quoting may start or stop anywhere in a token, so 'a"b c"d' is the
  single token 'ab cd', and '""' is an empty token.
- A backslash takes the next character literally, but only if it is a
  double quote, a backslash or whitespace.

The whole line is rejected on any error; a partial token list is never
returned. An unclosed quote is reported even when the line also holds a
bad escape sequence.
"""

from typing import List, Optional

from hint_server.constants import NTOKENS
from hint_server.exceptions.tokenize_exception import (
    TooManyTokensException,
    InvalidQuoteException,
    InvalidEscapeException,
)

QUOTE = '"'
ESCAPE = '\\'


def is_escapable(char: str) -> bool:
    """Return True if char may follow a backslash."""
    return char in (QUOTE, ESCAPE) or char.isspace()


def tokenize(line: str, max_tokens: int = NTOKENS) -> List[str]:
    """
    Split a command line into tokens.

    Args:
        line: The text to split
        max_tokens: Maximum number of tokens allowed in the line

    Returns:
        Tokens in input order. Empty or all-whitespace input gives [].

    Raises:
        TooManyTokensException: As soon as token max_tokens + 1 is opened
        InvalidQuoteException: Input ends inside a quoted section
        InvalidEscapeException: Backslash followed by anything outside the
            escape set, or a backslash at the end of input
    """
    tokens: List[str] = []
    current: List[str] = []
    in_token = False
    in_quote = False
    after_escape = False
    bad_escape: Optional[InvalidEscapeException] = None

    def open_token():
        nonlocal in_token
        if not in_token:
            if len(tokens) >= max_tokens:
                raise TooManyTokensException(max_tokens)
            in_token = True

    for char in line:
        if after_escape:
            if not is_escapable(char) and bad_escape is None:
                bad_escape = InvalidEscapeException(char)
            current.append(char)
            after_escape = False
        elif char == ESCAPE:
            open_token()
            after_escape = True
        elif char == QUOTE:
            open_token()
            in_quote = not in_quote
        elif char.isspace() and not in_quote:
            if in_token:
                tokens.append(''.join(current))
                current = []
                in_token = False
        else:
            open_token()
            current.append(char)

    if in_quote:
        raise InvalidQuoteException()
    if after_escape and bad_escape is None:
        bad_escape = InvalidEscapeException()
    if bad_escape is not None:
        raise bad_escape
    if in_token:
        tokens.append(''.join(current))

    return tokens

"""
Hint Server - Command Table and Interpreter

The command table maps a command name to its handler and is frozen once
built. The interpreter tokenizes a line, looks up token 0 and invokes the
handler with the full token list.

Interpreting is split in two halves so the receive thread can tokenize and
route a datagram while a separate worker runs the (possibly slow) handler:

    parsed = interpreter.parse(line)      # receive thread
    status = interpreter.execute(parsed)  # worker thread

interpret() runs both halves back to back.
"""

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Iterator, List, Mapping, Optional, Tuple, Union

from hint_server.constants import NTOKENS
from hint_server.exceptions.tokenize_exception import TokenizeException
from hint_server.session import SessionContext
from hint_server.status import StatusCode
from hint_server.tokenizer import tokenize

logger = logging.getLogger(__name__)

Handler = Callable[[SessionContext, List[str]], int]


@dataclass(frozen=True)
class CommandDescriptor:
    name: str
    handler: Handler


@dataclass(frozen=True)
class ParsedCommand:
    """A tokenized line whose token 0 matched a registered command."""
    descriptor: CommandDescriptor
    argv: Tuple[str, ...]

    @property
    def argc(self) -> int:
        return len(self.argv)


class CommandTable:
    """
    Read-only registry of commands, looked up by exact, case-sensitive name.
    """

    def __init__(self, commands: Mapping[str, Handler]):
        self._commands: Mapping[str, CommandDescriptor] = MappingProxyType({
            name: CommandDescriptor(name, handler)
            for name, handler in commands.items()
        })

    def get(self, name: str) -> Optional[CommandDescriptor]:
        return self._commands.get(name)

    def names(self) -> List[str]:
        return list(self._commands)

    def __contains__(self, name: object) -> bool:
        return name in self._commands

    def __iter__(self) -> Iterator[CommandDescriptor]:
        return iter(self._commands.values())

    def __len__(self) -> int:
        return len(self._commands)


class Interpreter:

    def __init__(
        self,
        table: CommandTable,
        context: SessionContext,
        max_tokens: int = NTOKENS,
    ):
        self.table = table
        self.context = context
        self.max_tokens = max_tokens

    def parse(self, line: str) -> Union[ParsedCommand, int]:
        """
        Tokenize a line and route it to a command.

        Returns:
            A ParsedCommand ready for execute(), or the StatusCode that ends
            interpretation early (parse error, empty line, unknown command).
            Early outcomes are recorded as the session's last status.
        """
        try:
            tokens = tokenize(line, self.max_tokens)
        except TokenizeException as e:
            logger.warning(f"Shell: {e.message}")
            return self._record(e.status)

        if not tokens:
            return self._record(StatusCode.NONE)

        descriptor = self.table.get(tokens[0])
        if descriptor is None:
            logger.warning(f"Shell: Command '{tokens[0]}' not found!")
            return self._record(StatusCode.NOT_FOUND)

        return ParsedCommand(descriptor, tuple(tokens))

    def execute(self, parsed: ParsedCommand) -> int:
        """Invoke the handler of a parsed command and record its status."""
        status = parsed.descriptor.handler(self.context, list(parsed.argv))
        if status != StatusCode.SUCCESS:
            logger.warning(f"Shell: Command '{parsed.descriptor.name}' failed with status {status}")
        return self._record(status)

    def interpret(self, line: str) -> int:
        """Tokenize, route and execute one line. Returns its StatusCode."""
        parsed = self.parse(line)
        if isinstance(parsed, ParsedCommand):
            return self.execute(parsed)
        return parsed

    def _record(self, status: int) -> int:
        self.context.last_status = status
        return status

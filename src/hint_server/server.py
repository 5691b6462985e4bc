"""
Hint Server - UDP Receive Loop

Listens for command datagrams on a single UDP socket. Each datagram is one
command line; nothing is ever sent back.

Two threads cooperate:

1. The receive thread keeps one recvfrom() outstanding on the socket. For
   each datagram it rejects truncated payloads, decodes the bytes, tokenizes
   the text and looks up the command, then goes straight back to recvfrom().
2. The CommandWorker runs handlers one at a time, in arrival order, so a
   slow handler (rendering a hint, talking to MPV) never keeps datagrams
   from being received.

Shutdown is cooperative: the 'exit' command or a signal sets the session's
shutdown event. The receive thread stops reading, the worker finishes the
handler it is running and drops whatever is still queued, and
serve_forever() returns the exit code.
"""

import logging
import queue
import socket
import threading
import time
from typing import Callable, Optional, Tuple, Union

from hint_server import constants
from hint_server.commands import Interpreter, ParsedCommand
from hint_server.status import StatusCode

logger = logging.getLogger(__name__)

_STOP = object()


class CommandWorker(threading.Thread):
    """
    Single consumer that executes parsed commands in order.

    An exception escaping a handler leaves the session in an unknown state,
    so it is logged and turned into a shutdown with exit code 1.
    """

    def __init__(self, interpreter: Interpreter, maxsize: int = constants.COMMAND_QUEUE_SIZE):
        super().__init__(name='hint-server-worker', daemon=True)
        self.interpreter = interpreter
        self.context = interpreter.context
        self._queue: "queue.Queue[object]" = queue.Queue(maxsize=maxsize)

    def submit(self, parsed: ParsedCommand) -> bool:
        """Queue a command. Returns False if the queue is full and it was dropped."""
        try:
            self._queue.put_nowait(parsed)
        except queue.Full:
            logger.warning(f"Command queue full, dropping command '{parsed.descriptor.name}'")
            return False
        return True

    def stop(self):
        # The stop marker must get through even when the queue is full
        self._queue.put(_STOP)

    def run(self):
        while True:
            item = self._queue.get()
            if item is _STOP:
                break
            if self.context.shutting_down:
                logger.info(f"Shutting down, dropping command '{item.descriptor.name}'")
                continue
            try:
                self.interpreter.execute(item)
            except Exception:
                logger.exception(f"Terminating due to exception in command '{item.descriptor.name}'")
                self.context.request_shutdown(1)


class UdpCommandServer:
    """
    Receives command datagrams and feeds them to the interpreter.

    Args:
        interpreter: Interpreter bound to the session context
        host: Address to bind
        port: UDP port to bind (0 lets the OS pick one, see .address)
        encoding: Encoding used to decode datagram payloads
        buffer_size: Receive buffer capacity; a datagram that fills it is
            treated as truncated
        poll_interval: How often the receive thread wakes up while idle,
            and the period of on_idle
        on_idle: Called about every poll_interval seconds, with or without
            traffic (watchdog pings, engine health checks)
        queue_size: Parsed commands that may wait for the worker; further
            commands are dropped until it catches up
    """

    def __init__(
        self,
        interpreter: Interpreter,
        host: str = constants.DEFAULT_HOST,
        port: int = constants.DEFAULT_PORT,
        encoding: str = 'utf-8',
        buffer_size: int = constants.RECEIVE_BUFFER_SIZE,
        poll_interval: float = constants.RECEIVE_POLL_INTERVAL_SEC,
        on_idle: Optional[Callable[[], None]] = None,
        queue_size: int = constants.COMMAND_QUEUE_SIZE,
    ):
        self.interpreter = interpreter
        self.context = interpreter.context
        self.encoding = encoding
        self.buffer_size = buffer_size
        self.poll_interval = poll_interval
        self.on_idle = on_idle
        self.worker = CommandWorker(interpreter, maxsize=queue_size)

        self.socket = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        try:
            self.socket.bind((host, port))
        except OSError:
            self.socket.close()
            raise
        self.socket.settimeout(poll_interval)

    @property
    def address(self) -> Tuple[str, int]:
        return self.socket.getsockname()

    def close(self):
        """Close the socket of a server that never ran serve_forever()."""
        self.socket.close()

    def shutdown(self, exit_code: int = 0):
        """Request a cooperative shutdown. Safe to call from a signal handler."""
        self.context.request_shutdown(exit_code)

    def serve_forever(self) -> int:
        """
        Receive and dispatch datagrams until shutdown is requested.

        Returns:
            The exit code requested by whoever asked for shutdown
        """
        host, port = self.address
        logger.info(f"Listening for commands on {host}:{port}...")
        self.worker.start()

        last_idle = time.monotonic()
        try:
            while not self.context.shutting_down:
                try:
                    data, remote = self.socket.recvfrom(self.buffer_size)
                except socket.timeout:
                    pass
                else:
                    self.handle_datagram(data, remote)

                # Steady traffic must not starve the idle hook
                now = time.monotonic()
                if self.on_idle and now - last_idle >= self.poll_interval:
                    last_idle = now
                    self.on_idle()
        finally:
            self.worker.stop()
            self.worker.join()
            self.socket.close()
            logger.info("Stopped listening for commands")

        return self.context.exit_code or 0

    def handle_datagram(self, data: bytes, remote=None) -> Union[ParsedCommand, int, None]:
        """
        Check, decode and route one datagram.

        Returns:
            The ParsedCommand handed to the worker, the StatusCode of a line
            that ended early in the interpreter, StatusCode.BUSY if the
            worker queue was full, or None if the datagram was dropped before
            reaching the interpreter.
        """
        logger.info(f"Received size: {len(data)} from {remote}")

        if len(data) >= self.buffer_size:
            logger.warning(
                f"The command is larger than {self.buffer_size - 1} bytes and can not be interpreted."
            )
            return None

        # Anything after a NUL byte is ignored
        payload = data.split(b'\0', 1)[0]
        try:
            line = payload.decode(self.encoding)
        except UnicodeDecodeError as e:
            logger.warning(f"Invalid byte sequence in command, it cannot be interpreted: {e}")
            return None

        if self.context.shutting_down:
            return None

        logger.info(f"Received command: {line!r}")
        parsed = self.interpreter.parse(line)
        if isinstance(parsed, ParsedCommand) and not self.worker.submit(parsed):
            self.context.last_status = StatusCode.BUSY
            return StatusCode.BUSY
        return parsed

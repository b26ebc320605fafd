"""
Querying the terminal for its default colors.

Terminals answer a number of queries with escape sequences written to their
input. Notably, the OSC 10 and OSC 11 queries ask for the default foreground
and background colors, respectively. Making such a query requires putting the
terminal into cbreak mode, so that the response is neither echoed nor held
back in the line buffer, writing the query, reading and parsing the response,
and restoring the terminal mode again. The last step must happen no matter
what, since a terminal that is left in cbreak mode is all but unusable from
the shell.

Terminals silently ignore OSC queries they do not support. To avoid waiting for
a response that never comes, :func:`status_report` follows every OSC query
with a request for the cursor position, which all terminals support. If the
cursor position comes back first, the terminal does not support the OSC query.
"""
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
import enum
import logging
import os
import re
import select
import termios
import threading
import time
from typing import Any, BinaryIO, ClassVar, Self, TextIO, TypeAlias

from .ansi import RawAnsi
from .color import TrueColor
from .ident import identify_terminal, TerminalIdentity


logger = logging.getLogger(__name__)


TerminalMode: TypeAlias = list[Any]


class TerminalModeComponent:
    CC = 6
    LFLAG = 3


OSC_TIMEOUT = 5.0
"""The number of seconds to wait for a complete response."""

MAX_RESPONSE_LENGTH = 32
"""The maximum number of bytes read for a single response."""


# Raw mode changes process-wide terminal state. At most one query at a time.
_raw_mode_lock = threading.Lock()


# --------------------------------------------------------------------------------------


class StatusReportError(Exception):
    """The terminal did not provide a usable status report."""


class UnsupportedTerminal(StatusReportError):
    """
    The terminal cannot be queried, because it isn't a terminal, is a
    multiplexer, or is controlled by another process group. The query was never
    attempted.
    """


class ProtocolTimeout(StatusReportError, TimeoutError):
    """
    The terminal did not respond before the deadline or kept sending bytes
    without completing its response.
    """


class MalformedResponse(StatusReportError, ValueError):
    """The terminal responded with something other than the expected report."""


class AttributeIOFailure(StatusReportError, OSError):
    """The terminal attributes could not be read or written."""


class QueryState(enum.Enum):
    """
    The states of a terminal query.

    A query starts out ``IDLE``, is ``GUARDED`` after passing all checks,
    enters ``RAW_MODE`` after changing the terminal mode, and ``SENT`` and
    ``READING`` while exchanging escape sequences with the terminal. It ends in
    one of ``DONE``, ``TIMED_OUT``, or ``REJECTED``. Queries that made it to
    ``RAW_MODE`` always conclude with ``RESTORED``.
    """
    IDLE = 'idle'
    GUARDED = 'guarded'
    RAW_MODE = 'raw mode'
    SENT = 'sent'
    READING = 'reading'
    DONE = 'done'
    TIMED_OUT = 'timed out'
    REJECTED = 'rejected'
    RESTORED = 'restored'


# --------------------------------------------------------------------------------------


def is_cbreak_mode(mode: TerminalMode) -> bool:
    """
    Determine whether the terminal mode is *cbreak mode*, i.e., characters are
    not echoed (``ECHO`` is not set), line editing is disabled (``ICANON`` is not
    set), and reads return upon the first available character (``VMIN`` is 1,
    ``VTIME`` is 0).

    Since raw mode makes the same changes and then some, this function detects
    raw mode as cbreak mode. That's just fine for its intended purpose,
    which is checking whether the terminal is prepared for handling ANSI
    escape sequences that require ANSI escape sequences as responses.
    """
    return (
        not (mode[TerminalModeComponent.LFLAG] & termios.ECHO)
        and not (mode[TerminalModeComponent.LFLAG] & termios.ICANON)
        and mode[TerminalModeComponent.CC][termios.VMIN] == 1
        and mode[TerminalModeComponent.CC][termios.VTIME] == 0
    )


def cbreak_mode_of(mode: TerminalMode) -> TerminalMode:
    """Create a copy of the terminal mode with cbreak mode enabled."""
    updated = list(mode)
    updated[TerminalModeComponent.LFLAG] = (
        mode[TerminalModeComponent.LFLAG] & ~(termios.ECHO | termios.ICANON)
    )
    cc = list(mode[TerminalModeComponent.CC])
    cc[termios.VMIN] = 1
    cc[termios.VTIME] = 0
    updated[TerminalModeComponent.CC] = cc
    return updated


class TerminalDevice:
    """
    The operating system interface of a terminal device.

    This class wraps a file descriptor and exposes exactly those operations
    that are needed for querying the terminal. It exists so that the query
    protocol can be exercised against a simulated terminal.
    """
    def __init__(self, file: int | TextIO | BinaryIO) -> None:
        self._fileno = file if isinstance(file, int) else file.fileno()

    def fileno(self) -> int:
        return self._fileno

    def isatty(self) -> bool:
        return os.isatty(self._fileno)

    def is_foreground(self) -> bool:
        """
        Determine whether this process belongs to the foreground process group
        of the terminal. A process in the background must not read from the
        terminal, since it would steal input from the foreground process.
        """
        try:
            return os.tcgetpgrp(self._fileno) == os.getpgrp()
        except OSError:
            return False

    def get_mode(self) -> TerminalMode:
        return termios.tcgetattr(self._fileno)

    def set_mode(self, mode: TerminalMode, when: int = termios.TCSANOW) -> None:
        termios.tcsetattr(self._fileno, when, mode)

    def write(self, data: bytes) -> None:
        view = memoryview(data)
        while view:
            written = os.write(self._fileno, view)
            view = view[written:]

    def wait_readable(self, timeout: float) -> bool:
        ready, _, _ = select.select([self._fileno], [], [], timeout)
        return bool(ready)

    def read_byte(self) -> int:
        data = os.read(self._fileno, 1)
        if not data:
            raise EOFError('terminal input has been closed')
        return data[0]


# --------------------------------------------------------------------------------------


class QuerySession:
    """
    A single query/response exchange with a terminal.

    A session tracks the :class:`QueryState`, the terminal mode from before the
    exchange, the deadline for the response, and the bytes of the response
    read so far. The terminal mode is changed and restored by the
    :meth:`raw_mode` context manager, which restores the mode on all exits,
    including exceptions.
    """
    TIMEOUT: ClassVar[float] = OSC_TIMEOUT

    def __init__(
        self,
        device: TerminalDevice,
        *,
        timeout: None | float = None,
    ) -> None:
        self._device = device
        self._timeout = self.TIMEOUT if timeout is None else timeout
        self._saved_mode: None | TerminalMode = None
        self._deadline: None | float = None
        self._buffer = bytearray()
        self._state = QueryState.IDLE
        self._outcome: None | QueryState = None

    @property
    def state(self) -> QueryState:
        """The current state of this session."""
        return self._state

    @property
    def outcome(self) -> None | QueryState:
        """
        The outcome of this session, i.e., ``DONE``, ``TIMED_OUT``, or
        ``REJECTED``, or ``None`` while the session is still in progress.
        """
        return self._outcome

    @property
    def saved_mode(self) -> None | TerminalMode:
        """The terminal mode from before this session's changes."""
        return self._saved_mode

    def _transition(self, state: QueryState) -> None:
        logger.debug('terminal query: %s -> %s', self._state.value, state.value)
        self._state = state
        if state in (QueryState.DONE, QueryState.TIMED_OUT, QueryState.REJECTED):
            self._outcome = state

    def _reject(self, error: StatusReportError) -> StatusReportError:
        self._transition(QueryState.REJECTED)
        return error

    def _time_out(self, error: ProtocolTimeout) -> ProtocolTimeout:
        self._transition(QueryState.TIMED_OUT)
        return error

    # ----------------------------------------------------------------------------------

    def guard(
        self,
        environ: None | Mapping[str, str] = None,
        *,
        trust_multiplexer: bool = False,
    ) -> Self:
        """
        Check that the terminal can be queried. This method signals an
        :class:`UnsupportedTerminal` error if the device is not a terminal, if
        the terminal is a dumb terminal, if the terminal is a multiplexer, which
        may be attached to several terminals, and ``trust_multiplexer`` is
        false, or if this process is not in the terminal's foreground process
        group.
        """
        identity = identify_terminal(environ)

        if not self._device.isatty():
            raise self._reject(UnsupportedTerminal('device is not a terminal'))
        if identity is TerminalIdentity.DUMB:
            raise self._reject(UnsupportedTerminal('dumb terminals do not respond'))
        if identity.is_multiplexer and not trust_multiplexer:
            raise self._reject(UnsupportedTerminal(
                f'terminal multiplexer {identity.value} may be attached to several terminals'
            ))
        if not self._device.is_foreground():
            raise self._reject(UnsupportedTerminal(
                'process is not in the foreground process group of the terminal'
            ))

        self._transition(QueryState.GUARDED)
        return self

    @contextmanager
    def raw_mode(self) -> Iterator[Self]:
        """
        Put the terminal into cbreak mode for the lifetime of the context.

        If reading or updating the terminal mode fails upon entry, this method
        signals an :class:`AttributeIOFailure` and leaves the terminal mode as
        is. Otherwise, it restores the previous mode upon exit, no matter how
        the context is exited. The restoration discards queued input, which
        also disposes of any stray response bytes.
        """
        try:
            saved_mode = self._device.get_mode()
        except (termios.error, OSError) as x:
            raise self._reject(
                AttributeIOFailure(f'unable to read terminal mode: {x}')
            ) from x

        if not is_cbreak_mode(saved_mode):
            try:
                self._device.set_mode(cbreak_mode_of(saved_mode))
            except (termios.error, OSError) as x:
                raise self._reject(
                    AttributeIOFailure(f'unable to enter cbreak mode: {x}')
                ) from x

        self._saved_mode = saved_mode
        self._transition(QueryState.RAW_MODE)
        try:
            yield self
        finally:
            try:
                self._device.set_mode(saved_mode, termios.TCSAFLUSH)
            except (termios.error, OSError) as x:
                logger.error('unable to restore terminal mode: %s', x)
                raise AttributeIOFailure(f'unable to restore terminal mode: {x}') from x
            self._transition(QueryState.RESTORED)

    # ----------------------------------------------------------------------------------

    def send(self, code: int) -> Self:
        """
        Write the OSC query with the given code followed by the cursor position
        request to the terminal. This also starts the clock on the deadline.
        A failed write ends the session as timed out.
        """
        try:
            self._device.write(RawAnsi.fuse(
                RawAnsi.OSC, str(code).encode('ascii'), b';?', RawAnsi.ST,
                RawAnsi.CSI, b'6n',
            ))
        except OSError as x:
            raise self._time_out(ProtocolTimeout(
                f'unable to write terminal query: {x}'
            )) from x
        self._deadline = time.monotonic() + self._timeout
        self._transition(QueryState.SENT)
        return self

    def _wait_for_input(self) -> None:
        assert self._deadline is not None
        while True:
            remaining = self._deadline - time.monotonic()
            if remaining <= 0:
                raise self._time_out(ProtocolTimeout(
                    'timed out waiting for terminal response'
                ))
            try:
                ready = self._device.wait_readable(remaining)
            except InterruptedError:
                logger.debug('terminal query: wait interrupted by signal, retrying')
                continue
            except OSError as x:
                raise self._time_out(ProtocolTimeout(
                    f'unable to wait for terminal response: {x}'
                )) from x

            if not ready:
                raise self._time_out(ProtocolTimeout(
                    'timed out waiting for terminal response'
                ))
            return

    def _next_byte(self) -> int:
        if len(self._buffer) >= MAX_RESPONSE_LENGTH:
            raise self._time_out(ProtocolTimeout(
                f'terminal response exceeds {MAX_RESPONSE_LENGTH} bytes'
            ))
        self._wait_for_input()
        try:
            b = self._device.read_byte()
        except (EOFError, OSError) as x:
            raise self._time_out(ProtocolTimeout(
                f'unable to read terminal response: {x}'
            )) from x
        self._buffer.append(b)
        return b

    def read_response(self) -> tuple[bytes, bool]:
        """
        Read the next response from the terminal. That is either an OSC report
        terminated by ``BEL`` or ``ST`` or a CSI report such as the cursor
        position. Any bytes before the first ``ESC`` are skipped but count
        towards the maximum response length.

        Returns:
            the response and a flag for whether it is an OSC report.
        """
        self._transition(QueryState.READING)
        self._buffer.clear()

        def bad_byte(b: int) -> MalformedResponse:
            self._transition(QueryState.DONE)
            return MalformedResponse(f'unexpected byte 0x{b:02X} in terminal response')

        b = self._next_byte()
        while b != 0x1B:
            b = self._next_byte()
        start = len(self._buffer) - 1

        b = self._next_byte()
        if b == 0x5D:  # ]
            while True:
                b = self._next_byte()
                if b == 0x07:
                    break
                if b == 0x1B:
                    b = self._next_byte()
                    if b == 0x5C:  # \\
                        break
                    raise bad_byte(b)
            return bytes(self._buffer[start:]), True

        if b == 0x5B:  # [
            b = self._next_byte()
            while 0x30 <= b <= 0x3F:
                b = self._next_byte()
            while 0x20 <= b <= 0x2F:
                b = self._next_byte()
            if 0x40 <= b <= 0x7E:
                return bytes(self._buffer[start:]), False

        raise bad_byte(b)

    def done(self) -> Self:
        self._transition(QueryState.DONE)
        return self


# --------------------------------------------------------------------------------------


def status_report(
    device: TerminalDevice,
    code: int,
    *,
    environ: None | Mapping[str, str] = None,
    trust_multiplexer: bool = False,
    timeout: None | float = None,
    session: None | QuerySession = None,
) -> bytes:
    """
    Query the terminal with OSC ``code`` and return the raw response.

    This function signals a :class:`StatusReportError` if the query fails for
    any reason. No matter the outcome, the terminal mode is the same upon
    return as it was upon invocation.
    """
    if session is None:
        session = QuerySession(device, timeout=timeout)
    session.guard(environ, trust_multiplexer=trust_multiplexer)

    with _raw_mode_lock, session.raw_mode():
        session.send(code)
        response, is_osc = session.read_response()
        if not is_osc:
            session.done()
            raise MalformedResponse(f'terminal does not support OSC {code}')

        # Consume the cursor position, which is of no further interest.
        session.read_response()
        session.done()

    logger.debug('terminal query: OSC %d returned %r', code, response)
    return response


_XTERM_COLOR = re.compile(
    rb'\x1b\](\d+);rgb:([0-9a-fA-F]{2,4})/([0-9a-fA-F]{2,4})/([0-9a-fA-F]{2,4})'
    rb'(?:\x07|\x1b\\|\x1b)'
)


def parse_xterm_color(response: bytes | str) -> TrueColor:
    """
    Parse the response to an OSC 4, 10, or 11 query, e.g.,
    ``ESC ] 11 ; rgb:1212/3434/5656 ESC \\``. Each coordinate has between two
    and four hexadecimal digits; only the two most significant digits are
    retained. This function signals a :class:`MalformedResponse` if the
    response does not have the expected format.
    """
    if isinstance(response, str):
        response = response.encode('utf8')

    match = _XTERM_COLOR.fullmatch(response)
    if match is None:
        raise MalformedResponse(f'{response!r} is not a color report')

    r, g, b = (int(match.group(i)[:2], 16) for i in (2, 3, 4))
    return TrueColor(r, g, b)


def query_color(
    device: TerminalDevice,
    code: int,
    **kwargs: Any,
) -> TrueColor:
    """
    Query the terminal for the color with OSC ``code``, e.g., 10 for the
    default foreground and 11 for the default background color. The keyword
    arguments are the same as for :func:`status_report`.
    """
    return parse_xterm_color(status_report(device, code, **kwargs))

"""
Terminal output with a color profile and the terminal's default colors.

An :class:`Output` combines everything the other modules determine about a
terminal: the color profile from the environment, the terminal identity, and
the default foreground and background colors as reported by the terminal. The
latter require querying the terminal, which is slow and not entirely without
risk. Hence, each ``Output`` queries the terminal at most once per color and
caches the result for the rest of its lifetime.

Run ``python -m termtint.output`` to see what this package determines about
the current terminal.
"""
import argparse
from collections.abc import Callable, Mapping
import json
import logging
import os
import sys
import threading
from typing import TextIO

from .color import AnsiColor, Color, lightness, NoColor, Profile, TrueColor
from .fidelity import env_no_color, environment_profile
from .ident import identify_terminal, TerminalIdentity, terminal_program
from .termio import query_color, StatusReportError, TerminalDevice, UnsupportedTerminal


logger = logging.getLogger(__name__)


FOREGROUND_CODE = 10
BACKGROUND_CODE = 11

DEFAULT_FOREGROUND = AnsiColor(7)
DEFAULT_BACKGROUND = AnsiColor(0)


class _CachedColor:
    """
    A color that is computed at most once. Once computed, reads proceed without
    locking. Until then, the first caller computes the color while holding the
    lock and all other callers wait for the lock and then read the result.
    """
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._resolved = False
        self._color: Color = NoColor()

    def get(self, compute: Callable[[], Color]) -> Color:
        if self._resolved:
            return self._color
        with self._lock:
            if not self._resolved:
                self._color = compute()
                self._resolved = True
        return self._color


def _colorfgbg(env: Mapping[str, str], position: int) -> None | AnsiColor:
    # COLORFGBG is "fg;bg" or, for rxvt, "fg;default;bg"
    value = env.get('COLORFGBG', '')
    if ';' not in value:
        return None

    field = value.split(';')[position]
    if not field.isdecimal() or int(field) > 15:
        return None
    return AnsiColor(int(field))


class Output:
    """
    A terminal output.

    Args:
        stream: is the output stream, which defaults to ``sys.stdout``
        profile: overrides the color profile determined from the environment
        environ: is the environment, which defaults to ``os.environ``; it is
            copied upon creation, so later changes have no effect
        assume_tty: overrides whether the stream is treated as a TTY
        trust_multiplexer: enables queries even when running inside GNU screen
            or tmux
        device: overrides the terminal device used for queries, which defaults
            to the stream's file descriptor
        timeout: overrides the deadline for each query in seconds
    """
    def __init__(
        self,
        stream: None | TextIO = None,
        *,
        profile: None | Profile = None,
        environ: None | Mapping[str, str] = None,
        assume_tty: None | bool = None,
        trust_multiplexer: bool = False,
        device: None | TerminalDevice = None,
        timeout: None | float = None,
    ) -> None:
        self._stream = sys.stdout if stream is None else stream
        self._environ = dict(os.environ if environ is None else environ)
        self._is_tty = self._stream.isatty() if assume_tty is None else assume_tty
        if profile is None:
            profile = environment_profile(self._environ, is_tty=self._is_tty)
        self._profile = profile
        self._trust_multiplexer = trust_multiplexer
        self._device = device
        self._timeout = timeout

        self._query_lock = threading.Lock()
        self._foreground = _CachedColor()
        self._background = _CachedColor()

    # ----------------------------------------------------------------------------------

    @property
    def stream(self) -> TextIO:
        return self._stream

    @property
    def profile(self) -> Profile:
        """This output's color profile."""
        return self._profile

    @property
    def is_tty(self) -> bool:
        return self._is_tty

    @property
    def environ(self) -> Mapping[str, str]:
        """The snapshot of the environment used by this output."""
        return self._environ

    @property
    def identity(self) -> TerminalIdentity:
        """The terminal identity based on this output's environment."""
        return identify_terminal(self._environ)

    def env_no_color(self) -> bool:
        """Determine whether this output's environment disables colors."""
        return env_no_color(self._environ)

    def color(self, text: str) -> None | Color:
        """Parse the string as a color and convert it to this output's profile."""
        return self._profile.color(text)

    def convert(self, color: Color) -> Color:
        """Convert the color to this output's profile."""
        return self._profile.convert(color)

    # ----------------------------------------------------------------------------------

    def _terminal_device(self) -> TerminalDevice:
        if self._device is None:
            try:
                self._device = TerminalDevice(self._stream)
            except (OSError, ValueError) as x:
                raise UnsupportedTerminal(f'output has no file descriptor: {x}') from x
        return self._device

    def _query(self, code: int) -> None | TrueColor:
        try:
            device = self._terminal_device()
            with self._query_lock:
                return query_color(
                    device,
                    code,
                    environ=self._environ,
                    trust_multiplexer=self._trust_multiplexer,
                    timeout=self._timeout,
                )
        except StatusReportError as x:
            logger.debug('unable to query OSC %d: %s', code, x)
            return None

    def _resolve_foreground(self) -> Color:
        if not self._is_tty:
            return NoColor()
        return (
            self._query(FOREGROUND_CODE)
            or _colorfgbg(self._environ, 0)
            or DEFAULT_FOREGROUND
        )

    def _resolve_background(self) -> Color:
        if not self._is_tty:
            return NoColor()
        return (
            self._query(BACKGROUND_CODE)
            or _colorfgbg(self._environ, -1)
            or DEFAULT_BACKGROUND
        )

    def foreground_color(self) -> Color:
        """
        Determine the terminal's default foreground color.

        If the output is not a TTY, the result is :class:`.NoColor`. Otherwise,
        this method queries the terminal with OSC 10. If that fails, it falls
        back on the ``COLORFGBG`` environment variable and then on ANSI color 7
        (light gray). The result is cached, and concurrent callers share a
        single query.
        """
        return self._foreground.get(self._resolve_foreground)

    def background_color(self) -> Color:
        """
        Determine the terminal's default background color.

        If the output is not a TTY, the result is :class:`.NoColor`. Otherwise,
        this method queries the terminal with OSC 11. If that fails, it falls
        back on the ``COLORFGBG`` environment variable and then on ANSI color 0
        (black). The result is cached, and concurrent callers share a single
        query.
        """
        return self._background.get(self._resolve_background)

    def has_dark_background(self) -> bool:
        """
        Determine whether the terminal has a dark background, i.e., the HSL
        lightness of the background color is less than one half. Without a
        background color, this method assumes a dark background.
        """
        background = self.background_color()
        if isinstance(background, NoColor):
            return True
        return lightness(background) < 0.5


# --------------------------------------------------------------------------------------


_default_output: None | Output = None
_default_output_lock = threading.Lock()


def default_output() -> Output:
    """
    Get the process-wide output for ``sys.stdout``. It is created on first use.
    Nothing in this package depends on it. It merely is a convenience for
    scripts that write to standard out only.
    """
    global _default_output
    with _default_output_lock:
        if _default_output is None:
            _default_output = Output()
        return _default_output


# --------------------------------------------------------------------------------------


def _describe(color: Color) -> str:
    match color:
        case NoColor():
            return 'none'
        case TrueColor():
            return color.hex
        case _:
            return f'{type(color).__name__}({color.index})'


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='python -m termtint.output',
        description='show the color capabilities of the current terminal',
    )
    parser.add_argument(
        '--no-query',
        action='store_true',
        help="don't query the terminal for its default colors",
    )
    parser.add_argument(
        '--trust-multiplexer',
        action='store_true',
        help='query the terminal even when running inside screen or tmux',
    )
    parser.add_argument(
        '--json',
        action='store_true',
        help='print the results as JSON',
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='log the terminal query to standard error',
    )
    return parser


def main() -> None:
    options = create_parser().parse_args()
    if options.verbose:
        logging.basicConfig(level=logging.DEBUG, stream=sys.stderr)

    output = Output(trust_multiplexer=options.trust_multiplexer)
    report: dict[str, None | bool | str] = {
        'profile': output.profile.name,
        'identity': output.identity.value,
        'program': terminal_program(output.environ),
        'no_color': output.env_no_color(),
    }
    if not options.no_query:
        report['foreground'] = _describe(output.foreground_color())
        report['background'] = _describe(output.background_color())
        report['dark_background'] = output.has_dark_background()

    if options.json:
        print(json.dumps(report, indent=2))
    else:
        for key, value in report.items():
            print(f'{key:<16} {value}')


if __name__ == '__main__':
    main()

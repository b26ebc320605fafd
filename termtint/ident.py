from collections.abc import Mapping
import enum
import os
import sys


class TerminalIdentity(enum.Enum):
    """
    A rough category for the terminal this process is running in.

    The category is a guesstimate based on environment variables only. It is
    not definitive, some categories overlap, and terminals misrepresent
    themselves all the time. But it suffices for avoiding terminals that are
    known not to answer queries, such as dumb terminals, or that cannot answer
    them unambiguously, such as multiplexers, which may be connected to several
    terminals at once.

    Attributes:
        GNU_SCREEN: the GNU screen multiplexer
        TMUX: the tmux multiplexer, including when pretending to be screen
        DUMB: a terminal without capabilities
        GOOGLE_CLOUD_SHELL: Google's browser-based cloud shell
        WINDOWS_TERMINAL: a tab of Windows Terminal, including WSL sessions
        XTERM_COMPATIBLE: a terminal claiming to be xterm
        OTHER_WINDOWS: PowerShell or CMD running standalone
        OTHER: any other terminal
    """
    GNU_SCREEN = 'GNU screen'
    TMUX = 'tmux'
    DUMB = 'dumb'
    GOOGLE_CLOUD_SHELL = 'Google Cloud Shell'
    WINDOWS_TERMINAL = 'Windows Terminal'
    XTERM_COMPATIBLE = 'xterm-compatible'
    OTHER_WINDOWS = 'Windows console'
    OTHER = 'other'

    @property
    def is_multiplexer(self) -> bool:
        """Determine whether the terminal is a terminal multiplexer."""
        return self is TerminalIdentity.GNU_SCREEN or self is TerminalIdentity.TMUX


def identify_terminal(
    env: None | Mapping[str, str] = None,
    platform: str = sys.platform,
) -> TerminalIdentity:
    """
    Identify the category of the current terminal from the environment
    variables for this process or the given snapshot thereof.
    """
    env = os.environ if env is None else env
    TERM = env.get('TERM', '')
    is_windows = platform == 'win32'

    if env.get('GOOGLE_CLOUD_SHELL') == 'true':
        return TerminalIdentity.GOOGLE_CLOUD_SHELL
    if env.get('WT_SESSION') and (is_windows or platform == 'linux'):
        return TerminalIdentity.WINDOWS_TERMINAL
    if TERM.startswith('screen'):
        if env.get('TERM_PROGRAM') == 'tmux':
            return TerminalIdentity.TMUX
        return TerminalIdentity.GNU_SCREEN
    if TERM.startswith('tmux'):
        return TerminalIdentity.TMUX
    if TERM.startswith('dumb'):
        return TerminalIdentity.DUMB
    if TERM.startswith('xterm'):
        return TerminalIdentity.XTERM_COMPATIBLE
    if is_windows and not TERM:
        return TerminalIdentity.OTHER_WINDOWS
    return TerminalIdentity.OTHER


def _init_registry() -> dict[str, str]:
    registry: dict[str, str] = {}

    for name, *aliases in (
        ("Alacritty", "org.alacritty", "org.alacritty.Alacritty"),
        ("Ghostty", "com.mitchellh.ghostty", "ghostty"),
        ("iTerm", "com.googlecode.iterm2", "iTerm2", "iTerm.app"),
        ("Kitty", "net.kovidgoyal.kitty"),
        ("Rio", "com.raphaelamorim.rio"),
        ("Terminal.app", "com.apple.Terminal", "Apple_Terminal"),
        ("tmux",),
        ("VSCode", "com.microsoft.VSCode", "vscode", "Visual Studio Code"),
        ("WezTerm", "com.github.wez.wezterm", "org.wezfurlong.wezterm"),
    ):
        registry[name.casefold()] = name
        for alias in aliases:
            registry[alias.casefold()] = name

    return registry

_REGISTRY = _init_registry()


def normalize_terminal_name(name: str) -> str:
    """
    Normalize the terminal name or bundle ID.

    If the given name is an alias for a well-known terminal, this function
    returns the canonical name. Otherwise, it just returns the given name.
    """
    normal = _REGISTRY.get(name.casefold())
    return normal if normal else name


def terminal_program(env: None | Mapping[str, str] = None) -> None | str:
    """
    Look up the normalized name of the terminal program, as announced by the
    ``TERM_PROGRAM`` environment variable.
    """
    env = os.environ if env is None else env
    name = env.get('TERM_PROGRAM')
    return normalize_terminal_name(name) if name else None

from collections.abc import Mapping
import os

from .color import Profile


_TRUECOLOR_TERMINALS = frozenset((
    'alacritty', 'contour', 'rio', 'wezterm', 'xterm-ghostty', 'xterm-kitty'
))
_ANSI_TERMINALS = frozenset(('linux', 'xterm'))


def _environ(env: None | Mapping[str, str]) -> Mapping[str, str]:
    return os.environ if env is None else env


def cli_color_forced(env: None | Mapping[str, str] = None) -> bool:
    """
    Determine whether the environment forces colors. Following the `CLICOLOR
    <https://bixense.com/clicolors/>`_ convention, that is the case if
    ``CLICOLOR_FORCE`` is set to anything but the empty string or ``0``.
    """
    force = _environ(env).get('CLICOLOR_FORCE', '')
    return force != '' and force != '0'


def env_no_color(env: None | Mapping[str, str] = None) -> bool:
    """
    Determine whether the environment disables colors. That is the case if
    ``NO_COLOR`` is set to a non-empty string, following the `NO_COLOR
    <https://no-color.org>`_ convention, or if ``CLICOLOR`` is ``0`` and
    colors are not forced at the same time.
    """
    env = _environ(env)
    return env.get('NO_COLOR', '') != '' or (
        env.get('CLICOLOR') == '0' and not cli_color_forced(env)
    )


def color_profile(
    env: None | Mapping[str, str] = None,
    *,
    is_tty: bool = True,
) -> Profile:
    """
    Determine the color profile supported by the current terminal based on the
    ``TERM`` and ``COLORTERM`` environment variables. The ``is_tty`` argument
    indicates whether the terminal's output is a TTY. This function ignores
    the conventions for disabling or forcing colors; use
    :func:`environment_profile` to take them into account.
    """
    if not is_tty:
        return Profile.ASCII

    env = _environ(env)
    if env.get('GOOGLE_CLOUD_SHELL') == 'true':
        return Profile.TRUECOLOR

    TERM = env.get('TERM', '')
    COLORTERM = env.get('COLORTERM', '').lower()

    if COLORTERM in ('truecolor', '24bit'):
        # GNU screen does not pass 24-bit colors through, but tmux pretending
        # to be screen does.
        if TERM.startswith('screen') and env.get('TERM_PROGRAM') != 'tmux':
            return Profile.ANSI256
        return Profile.TRUECOLOR

    if COLORTERM in ('yes', 'true'):
        return Profile.ANSI256

    if TERM in _TRUECOLOR_TERMINALS:
        return Profile.TRUECOLOR
    if TERM in _ANSI_TERMINALS:
        return Profile.ANSI

    if '256color' in TERM:
        return Profile.ANSI256
    if 'color' in TERM or 'ansi' in TERM:
        return Profile.ANSI

    return Profile.ASCII


def environment_profile(
    env: None | Mapping[str, str] = None,
    *,
    is_tty: bool = True,
) -> Profile:
    """
    Determine the current terminal's color profile based on the environment
    variables for this process or the given snapshot thereof.

    Disabling colors with ``NO_COLOR`` or ``CLICOLOR=0`` takes precedence over
    everything else. Otherwise, this function falls back on
    :func:`color_profile`, upgrading a result of ``ASCII`` to ``ANSI`` if the
    environment forces colors.

    The result is not cached. Callers that need a stable result across changes
    to the environment should pass a snapshot.
    """
    env = _environ(env)
    if env_no_color(env):
        return Profile.ASCII

    profile = color_profile(env, is_tty=is_tty)
    if profile is Profile.ASCII and cli_color_forced(env):
        return Profile.ANSI
    return profile

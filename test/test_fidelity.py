import unittest

from termtint.color import Profile
from termtint.fidelity import (
    cli_color_forced,
    color_profile,
    env_no_color,
    environment_profile,
)


class TestEnvNoColor(unittest.TestCase):

    def test_no_color(self) -> None:
        for environ, expected in (
            ({}, False),
            ({'NO_COLOR': 'Y'}, True),
            ({'NO_COLOR': ''}, False),
            ({'NO_COLOR': 'Y', 'CLICOLOR': '1'}, True),
            ({'NO_COLOR': 'Y', 'CLICOLOR_FORCE': '1'}, True),
            ({'CLICOLOR': '0'}, True),
            ({'CLICOLOR': '1'}, False),
            ({'CLICOLOR_FORCE': '0'}, False),
            ({'CLICOLOR_FORCE': '1'}, False),
            ({'CLICOLOR': '0', 'CLICOLOR_FORCE': '1'}, False),
            ({'CLICOLOR': '1', 'CLICOLOR_FORCE': '1'}, False),
            ({'CLICOLOR': '0', 'CLICOLOR_FORCE': '0'}, True),
            ({'CLICOLOR': '1', 'CLICOLOR_FORCE': '0'}, False),
        ):
            with self.subTest(environ=environ):
                self.assertEqual(env_no_color(environ), expected)

    def test_color_forced(self) -> None:
        self.assertFalse(cli_color_forced({}))
        self.assertFalse(cli_color_forced({'CLICOLOR_FORCE': ''}))
        self.assertFalse(cli_color_forced({'CLICOLOR_FORCE': '0'}))
        self.assertTrue(cli_color_forced({'CLICOLOR_FORCE': '1'}))
        self.assertTrue(cli_color_forced({'CLICOLOR_FORCE': 'yes'}))


class TestProfile(unittest.TestCase):

    def test_color_profile(self) -> None:
        for environ, expected in (
            ({}, Profile.ASCII),
            ({'TERM': 'dumb'}, Profile.ASCII),
            ({'GOOGLE_CLOUD_SHELL': 'true'}, Profile.TRUECOLOR),
            ({'TERM': 'xterm-256color', 'COLORTERM': 'truecolor'}, Profile.TRUECOLOR),
            ({'TERM': 'xterm-256color', 'COLORTERM': '24BIT'}, Profile.TRUECOLOR),
            ({'TERM': 'screen-256color', 'COLORTERM': 'truecolor'}, Profile.ANSI256),
            (
                {'TERM': 'screen-256color', 'COLORTERM': 'truecolor', 'TERM_PROGRAM': 'tmux'},
                Profile.TRUECOLOR,
            ),
            ({'TERM': 'screen-256color'}, Profile.ANSI256),
            ({'TERM': 'screen'}, Profile.ASCII),
            ({'COLORTERM': 'yes'}, Profile.ANSI256),
            ({'COLORTERM': 'true'}, Profile.ANSI256),
            ({'TERM': 'xterm-kitty'}, Profile.TRUECOLOR),
            ({'TERM': 'wezterm'}, Profile.TRUECOLOR),
            ({'TERM': 'alacritty'}, Profile.TRUECOLOR),
            ({'TERM': 'xterm-ghostty'}, Profile.TRUECOLOR),
            ({'TERM': 'xterm'}, Profile.ANSI),
            ({'TERM': 'linux'}, Profile.ANSI),
            ({'TERM': 'xterm-256color'}, Profile.ANSI256),
            ({'TERM': 'xterm-color'}, Profile.ANSI),
            ({'TERM': 'ansi'}, Profile.ANSI),
        ):
            with self.subTest(environ=environ):
                self.assertIs(color_profile(environ), expected)

    def test_exact_terminal_names(self) -> None:
        # Only exact names qualify, not names sharing the prefix.
        for TERM, expected in (
            ('linux', Profile.ANSI),
            ('xterm', Profile.ANSI),
            ('linux-m', Profile.ASCII),
            ('xterm-mono', Profile.ASCII),
            ('kitty', Profile.ASCII),
            ('xterm-kitty', Profile.TRUECOLOR),
        ):
            with self.subTest(TERM=TERM):
                self.assertIs(color_profile({'TERM': TERM}), expected)

    def test_not_a_tty(self) -> None:
        environ = {'TERM': 'xterm-kitty', 'COLORTERM': 'truecolor'}
        self.assertIs(color_profile(environ, is_tty=False), Profile.ASCII)
        self.assertIs(environment_profile(environ, is_tty=False), Profile.ASCII)

    def test_environment_profile(self) -> None:
        for environ, expected in (
            ({'TERM': 'xterm-256color'}, Profile.ANSI256),
            ({'TERM': 'xterm-256color', 'NO_COLOR': '1'}, Profile.ASCII),
            ({'TERM': 'xterm-256color', 'CLICOLOR': '0'}, Profile.ASCII),
            ({'TERM': 'dumb', 'CLICOLOR_FORCE': '1'}, Profile.ANSI),
            ({'TERM': 'xterm-kitty', 'CLICOLOR_FORCE': '1'}, Profile.TRUECOLOR),
            ({'NO_COLOR': '1', 'CLICOLOR_FORCE': '1'}, Profile.ASCII),
        ):
            with self.subTest(environ=environ):
                self.assertIs(environment_profile(environ), expected)

    def test_forced_colors_without_tty(self) -> None:
        # Forcing colors upgrades ASCII, including for output that isn't a TTY.
        self.assertIs(
            environment_profile({'CLICOLOR_FORCE': '1'}, is_tty=False), Profile.ANSI
        )

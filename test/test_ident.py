import unittest

from termtint.ident import (
    identify_terminal,
    normalize_terminal_name,
    TerminalIdentity,
    terminal_program,
)


WT_SESSION = 'aec55a8a-d1c8-48a9-93f9-65da8c5e468d'


class TestIdentity(unittest.TestCase):

    def test_identity(self) -> None:
        for name, environ, platform, expected in (
            ('Google Cloud Shell', {'GOOGLE_CLOUD_SHELL': 'true'}, 'linux',
                TerminalIdentity.GOOGLE_CLOUD_SHELL),
            ('other', {}, 'linux', TerminalIdentity.OTHER),
            ('Windows Terminal', {'WT_SESSION': WT_SESSION}, 'win32',
                TerminalIdentity.WINDOWS_TERMINAL),
            ('Windows Terminal hosting xterm',
                {'WT_SESSION': WT_SESSION, 'TERM': 'xterm-256color'}, 'win32',
                TerminalIdentity.WINDOWS_TERMINAL),
            ('Windows Terminal hosting WSL',
                {'WT_SESSION': WT_SESSION, 'TERM': 'xterm-256color'}, 'linux',
                TerminalIdentity.WINDOWS_TERMINAL),
            ('GNU screen', {'TERM': 'screen-256color'}, 'linux',
                TerminalIdentity.GNU_SCREEN),
            ('tmux pretending to be screen',
                {'TERM': 'screen-256color', 'TERM_PROGRAM': 'tmux'}, 'linux',
                TerminalIdentity.TMUX),
            ('tmux being honest', {'TERM': 'tmux-256color'}, 'linux',
                TerminalIdentity.TMUX),
            ('dumb', {'TERM': 'dumb-256color'}, 'linux', TerminalIdentity.DUMB),
            ('xterm', {'TERM': 'xterm-256color'}, 'linux',
                TerminalIdentity.XTERM_COMPATIBLE),
            ('xterm on Windows', {'TERM': 'xterm-256color'}, 'win32',
                TerminalIdentity.XTERM_COMPATIBLE),
            ('Windows console', {}, 'win32', TerminalIdentity.OTHER_WINDOWS),
            ('WezTerm', {'TERM': 'wezterm'}, 'linux', TerminalIdentity.OTHER),
            ('WT_SESSION on macOS', {'WT_SESSION': WT_SESSION}, 'darwin',
                TerminalIdentity.OTHER),
        ):
            with self.subTest(name):
                self.assertIs(identify_terminal(environ, platform), expected)

    def test_is_multiplexer(self) -> None:
        self.assertTrue(TerminalIdentity.GNU_SCREEN.is_multiplexer)
        self.assertTrue(TerminalIdentity.TMUX.is_multiplexer)
        self.assertFalse(TerminalIdentity.XTERM_COMPATIBLE.is_multiplexer)
        self.assertFalse(TerminalIdentity.DUMB.is_multiplexer)


class TestTerminalProgram(unittest.TestCase):

    def test_normalize(self) -> None:
        self.assertEqual(normalize_terminal_name('iTerm.app'), 'iTerm')
        self.assertEqual(normalize_terminal_name('apple_terminal'), 'Terminal.app')
        self.assertEqual(normalize_terminal_name('vscode'), 'VSCode')
        self.assertEqual(normalize_terminal_name('Hyper'), 'Hyper')

    def test_terminal_program(self) -> None:
        self.assertEqual(terminal_program({'TERM_PROGRAM': 'WezTerm'}), 'WezTerm')
        self.assertEqual(terminal_program({'TERM_PROGRAM': 'ghostty'}), 'Ghostty')
        self.assertIsNone(terminal_program({}))
        self.assertIsNone(terminal_program({'TERM_PROGRAM': ''}))

__all__ = (
    # Colors and profiles
    'NoColor',
    'AnsiColor',
    'EightBitColor',
    'TrueColor',
    'Color',
    'Profile',
    'convert',
    'parse_color',
    # Detect profile from environment
    'environment_profile',
    'env_no_color',
    # Identify terminal
    'TerminalIdentity',
    'identify_terminal',
    # Query terminal
    'StatusReportError',
    'query_color',
    # Put it all together
    'Output',
    'default_output',
)

from .color import (
    NoColor,
    AnsiColor,
    EightBitColor,
    TrueColor,
    Color,
    Profile,
    convert,
    parse_color,
)

from .fidelity import (
    environment_profile,
    env_no_color,
)

from .ident import (
    TerminalIdentity,
    identify_terminal,
)

from .termio import (
    StatusReportError,
    query_color,
)

from .output import (
    Output,
    default_output,
)

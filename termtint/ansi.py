"""Low-level support for assembling ANSI escape sequences"""
import enum


class Ansi(enum.StrEnum):
    """
    An enumeration of ANSI escape sequence components.

    Attributes:
        CSI: starts control sequences, including SGR sequences; it is defined
            with the two-character C0 sequence and not the one-character C1
            sequence, since the latter conflicts with UTF-8

    Colors contribute SGR parameters through their ``sequence()`` method. Since
    :class:`.NoColor` contributes the empty string, which must not turn into an
    empty parameter, use :meth:`sgr` to assemble a complete SGR sequence:

    .. code-block:: python

        color = Profile.ANSI256.color('#abcdef')
        print(Ansi.sgr(color.sequence(), '1'), 'Parrot!', Ansi.sgr('0'), sep='')

    """
    CSI = '\x1b['

    @staticmethod
    def sgr(*parameters: str) -> str:
        """
        Assemble a select graphic rendition sequence from the given parameter
        groups. Empty groups are omitted entirely. If no group remains, this
        method returns the empty string and not the reset sequence.
        """
        groups = [p for p in parameters if p]
        if not groups:
            return ''
        return f"{Ansi.CSI}{';'.join(groups)}m"


class RawAnsi(bytes, enum.Enum):
    """
    An enumeration of raw ANSI escape sequence components.

    This is a simpler, ``bytes``-valued version of :class:`Ansi`. The protocol
    code in :mod:`.termio` reads and writes bytes and hence uses this
    enumeration.
    """
    CSI = b'\x1b['
    OSC = b'\x1b]'
    ST = b'\x1b\\'

    @staticmethod
    def fuse(*fragments: bytes) -> bytes:
        """Fuse the bytes fragments together."""
        return b''.join(fragments)

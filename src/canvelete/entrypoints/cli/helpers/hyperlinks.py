"""OSC-8 terminal hyperlinks for the Canvelete CLI.

Used for the help epilog and for the dashboard/editor URLs printed by
``canvelete open``. Falls back to the bare URL when the stream is not an
interactive terminal known to render OSC-8 links.
"""

import os
import sys
from typing import TextIO

_OSC8_PROGRAMS = frozenset({"apple_terminal", "vscode", "iterm.app", "wezterm", "kitty", "ghostty"})


def supports_osc8(stream: TextIO | None = None) -> bool:
    """Best-effort check that `stream` (default stdout) renders OSC-8 links.

    Piped or redirected streams never do.
    """
    stream = stream or sys.stdout
    if not getattr(stream, "isatty", lambda: False)():
        return False
    if (os.getenv("TERM_PROGRAM") or "").lower() in _OSC8_PROGRAMS:
        return True
    return bool(
        os.getenv("WT_SESSION")  # Windows Terminal
        or os.getenv("VTE_VERSION")  # GNOME Terminal, Tilix, ...
        or os.getenv("TERM", "").startswith(("alacritty", "konsole"))
    )


def hyperlink(url: str, label: str | None = None, stream: TextIO | None = None) -> str:
    """Render `url` as a clickable link labelled `label` (default: the URL).

    Without OSC-8 support the plain URL is returned, even when a label is
    given, so the address is never hidden.
    """
    if not supports_osc8(stream):
        return url
    return f"\x1b]8;;{url}\x07{label or url}\x1b]8;;\x07"  # OSC 8 ; ; URL BEL

"""Terminal message helpers for the Canvelete CLI.

Small helpers for rendering user-visible lines with sensible emoji→ASCII fallbacks.
Messages write to stderr so stdout can remain machine-readable (``--json``,
``render --stdout``).
"""

import click


def _supports_character(character: str) -> bool:
    """Return True if *character* can be encoded on stderr.

    This is a lightweight guard to decide whether to emit emojis or fall back
    to ASCII so terminals without UTF-8 don't raise `UnicodeEncodeError`.
    """
    stream = click.get_text_stream("stderr")  # pragma: no mutate
    encoding = getattr(stream, "encoding", None) or "ascii"
    try:
        character.encode(encoding)
    except UnicodeEncodeError:
        return False
    return True


def _glyph(emoji: str, fallback: str) -> str:
    return emoji if _supports_character(emoji) else fallback


def caution_glyph() -> str:
    """"⚠️" when stderr can encode it, otherwise "[!]"."""
    return _glyph("⚠️", "[!]")  # pragma: no mutate


def success_glyph() -> str:
    """"✅" when stderr can encode it, otherwise "[OK]"."""
    return _glyph("✅", "[OK]")  # pragma: no mutate


def error_glyph() -> str:
    """"❌" when stderr can encode it, otherwise "[X]"."""
    return _glyph("❌", "[X]")  # pragma: no mutate


def info_glyph() -> str:
    """"ℹ️" when stderr can encode it, otherwise "[i]"."""
    return _glyph("ℹ️", "[i]")  # pragma: no mutate


def warn(msg: str) -> None:
    """Emit a yellow, bold warning line to **stderr** with a caution glyph.

    Example:
        ``⚠️  Active profile was removed. Switched to "default".``
    """
    click.secho(f"{caution_glyph()}  {msg}", fg="yellow", bold=True, err=True)


def success(msg: str) -> None:
    """Emit a green, bold success line to **stderr** with a success glyph.

    Example:
        ``✅  Rendered successfully!``
    """
    click.secho(f"{success_glyph()}  {msg}", fg="green", bold=True, err=True)


def error(msg: str) -> None:
    """Emit a red, bold error line to **stderr** with an error glyph."""
    click.secho(f"{error_glyph()}  {msg}", fg="red", bold=True, err=True)


def info(msg: str) -> None:
    """Emit a plain informational line to **stderr** with an info glyph."""
    click.secho(f"{info_glyph()}  {msg}", fg="blue", err=True)


def detail(msg: str) -> None:
    """Emit a dimmed secondary line to **stderr** (paths, sizes, hints)."""
    click.secho(f"   {msg}", dim=True, err=True)

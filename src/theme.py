"""Color & style helpers for console (non-interactive) output.

Decisions:
- Completed tasks render green + struck through; open tasks render blue.
- Truecolor preferred; falls back to 256-color cube if unsupported.
- Disables automatically when not a TTY unless FORCE_COLOR=1.
- Honors NO_COLOR for complete disable.
- Supports palette overrides via environment or project .env file.
"""
from __future__ import annotations
import os, re, sys
from config import lookup

_FORCE = os.environ.get("FORCE_COLOR", "").lower() in {"1", "true", "yes", "on"}
_NO_COLOR = os.environ.get("NO_COLOR") is not None
_ENABLE = (_FORCE or sys.stdout.isatty()) and not _NO_COLOR
_COLORTERM = os.environ.get("COLORTERM", "").lower()
_USE_TRUECOLOR = _ENABLE and any(tok in _COLORTERM for tok in ("truecolor", "24bit"))
_HEX_RE = re.compile(r"^#?[0-9a-fA-F]{6}$")

def _code(part: str) -> str:
    """Generate ANSI escape code for a given style part."""
    return f"\033[{part}m" if _ENABLE else ''

def _hex_to_rgb(hex_code: str) -> tuple[int,int,int]:
    """Convert a hex color code to an RGB tuple."""
    h = hex_code.lstrip('#')
    return int(h[0:2],16), int(h[2:4],16), int(h[4:6],16)

def _fg_truecolor(r: int, g: int, b: int) -> str:
    return f"\033[38;2;{r};{g};{b}m"

def _fg_256(r: int, g: int, b: int) -> str:
    """Approximate RGB to xterm 256-color cube."""
    def to_6(x: int) -> int:
        return int(round(x / 255 * 5))
    r6, g6, b6 = to_6(r), to_6(g), to_6(b)
    idx = 16 + 36 * r6 + 6 * g6 + b6
    return f"\033[38;5;{idx}m"

def _from_hex(hex_code: str) -> str:
    """Convert a hex color code to an ANSI escape sequence."""
    if not _ENABLE:
        return ''
    r, g, b = _hex_to_rgb(hex_code)
    if _USE_TRUECOLOR:
        return _fg_truecolor(r, g, b)
    return _fg_256(r, g, b)

def _palette(key: str, default: str) -> str:
    value = lookup(key)
    if value and _HEX_RE.match(value):
        return '#' + value.lstrip('#')
    return default

RESET = _code('0')
BOLD = _code('1')
STRIKE = _code('9')

HEX_PRIMARY_DEFAULT = '#476EAE'
HEX_OPEN_DEFAULT = '#5B8DEF'
HEX_DONE_DEFAULT = '#A7E399'

HEX_PRIMARY = _palette('TODO_PRIMARY', HEX_PRIMARY_DEFAULT)
HEX_OPEN = _palette('TODO_OPEN', HEX_OPEN_DEFAULT)
HEX_DONE = _palette('TODO_DONE', HEX_DONE_DEFAULT)

PRIMARY = _from_hex(HEX_PRIMARY)
C_OPEN = _from_hex(HEX_OPEN)
C_DONE = _from_hex(HEX_DONE)

ID_COLOR = PRIMARY + BOLD
OPEN_COLOR = C_OPEN
DONE_COLOR = C_DONE + STRIKE

def color(text: str, *styles: str) -> str:
    """Apply ANSI styles to a given text."""
    if not _ENABLE:
        return text
    return ''.join(styles) + text + RESET

__all__ = ['color', 'ID_COLOR', 'OPEN_COLOR', 'DONE_COLOR']

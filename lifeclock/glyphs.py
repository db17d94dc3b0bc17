from datetime import datetime
from typing import Dict, List

GLYPH_ROWS = 5

DIGITS: Dict[str, List[str]] = {
    "0": ["███", "█ █", "█ █", "█ █", "███"],
    "1": [" █ ", "██ ", " █ ", " █ ", "███"],
    "2": ["███", "  █", "███", "█  ", "███"],
    "3": ["███", "  █", " ██", "  █", "███"],
    "4": ["█ █", "█ █", "███", "  █", "  █"],
    "5": ["███", "█  ", "███", "  █", "███"],
    "6": ["███", "█  ", "███", "█ █", "███"],
    "7": ["███", "  █", "  █", "  █", "  █"],
    "8": ["███", "█ █", "███", "█ █", "███"],
    "9": ["███", "█ █", "███", "  █", "███"],
    ":": ["   ", " █ ", "   ", " █ ", "   "],
    " ": ["   ", "   ", "   ", "   ", "   "],
}


def clock_lines(now: datetime) -> List[str]:
    """HH:MM:SS as five text rows; the colons go dark on odd seconds."""
    lines = [""] * GLYPH_ROWS
    for ch in now.strftime("%H:%M:%S"):
        if ch == ":" and now.second % 2:
            ch = " "
        glyph = DIGITS.get(ch)
        if glyph is None:
            continue
        for i in range(GLYPH_ROWS):
            lines[i] += glyph[i] + " "
    return lines

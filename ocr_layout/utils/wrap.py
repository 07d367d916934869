"""
Greedy word wrapping.

Two width estimates are supported:
- character count, for callers that think in "characters per line"
- accumulated width in mm, for callers that know the glyph width

Words are never split. A word longer than the limit is emitted on its
own line, overlong.
"""

from typing import List, Tuple


def wrap_by_chars(text: str, max_chars: int) -> List[str]:
    """
    Wrap text so that each line holds at most ``max_chars`` characters.

    Args:
        text: Text to wrap; any whitespace separates words
        max_chars: Maximum line length, counting the joining spaces

    Returns:
        Wrapped lines (empty list for blank text)
    """
    lines = []
    current = ""
    for word in text.split():
        if current and len(current) + len(word) + 1 > max_chars:
            lines.append(current)
            current = ""
        current = f"{current} {word}" if current else word
    if current:
        lines.append(current)
    return lines


def wrap_by_width(
    text: str,
    max_width: float,
    char_width: float
) -> List[Tuple[str, float]]:
    """
    Wrap text by accumulating estimated widths.

    Args:
        text: Text to wrap
        max_width: Maximum line width (mm)
        char_width: Estimated width of one glyph, spaces included (mm)

    Returns:
        List of (line, estimated line width)
    """
    lines = []
    current = []
    current_width = 0.0
    for word in text.split():
        word_width = len(word) * char_width
        space = char_width if current else 0.0
        if current and current_width + space + word_width > max_width:
            lines.append((" ".join(current), current_width))
            current = []
            current_width = 0.0
            space = 0.0
        current.append(word)
        current_width += space + word_width
    if current:
        lines.append((" ".join(current), current_width))
    return lines

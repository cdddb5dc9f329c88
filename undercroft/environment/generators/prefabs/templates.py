"""Glyph grammar shared by ASCII templates and REXPaint files.

``' '`` is Floor, ``#`` Wall, ``>`` down stairs and ``@`` the player start.
Letters and symbols in GLYPH_SPAWNS are Floor with a spawn request on top.
"""

from __future__ import annotations

from undercroft.environment.tile_types import TileType

GLYPH_TILES: dict[str, TileType] = {
    " ": TileType.FLOOR,
    "#": TileType.WALL,
    "@": TileType.FLOOR,
    ">": TileType.DOWN_STAIRS,
}

GLYPH_SPAWNS: dict[str, str] = {
    "g": "Goblin",
    "o": "Orc",
    "^": "Bear Trap",
    "%": "Rations",
    "!": "Health Potion",
}

START_GLYPH = "@"

_NBSP = "\u00a0"


def template_rows(template: str, width: int, height: int) -> list[str]:
    """Split a template string into exactly ``height`` rows of ``width`` glyphs.

    A single leading newline is ignored so templates can start on the line
    after the opening quotes. Short rows, and missing trailing rows, are padded
    with Floor. Non-breaking spaces count as plain spaces.

    Raises:
        ValueError: If a row is wider than ``width`` or there are more than
            ``height`` rows.
    """
    text = template.replace("\r", "").replace(_NBSP, " ")
    if text.startswith("\n"):
        text = text[1:]
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()

    if len(lines) > height:
        raise ValueError(f"Template has {len(lines)} rows, expected at most {height}")
    for y, line in enumerate(lines):
        if len(line) > width:
            raise ValueError(f"Template row {y} is {len(line)} wide, limit {width}")

    rows = [line.ljust(width) for line in lines]
    rows.extend(" " * width for _ in range(height - len(rows)))
    return rows

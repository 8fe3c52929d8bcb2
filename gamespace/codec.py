"""One record per line: ``name|path|args`` with backslash escaping."""
from __future__ import annotations

from typing import List

from .errors import DecodeError
from .models import Game

DELIMITER = "|"
ESCAPE = "\\"
FIELD_COUNT = 3


def escape(text: str) -> str:
    return (
        text.replace(ESCAPE, ESCAPE * 2)
        .replace(DELIMITER, ESCAPE + DELIMITER)
        .replace("\n", ESCAPE + "n")
    )


def encode_record(game: Game) -> str:
    return DELIMITER.join(escape(v) for v in (game.name, game.path, game.args))


def split_line(line: str) -> List[str]:
    """Split on unescaped delimiters and unescape each field in the same pass.

    Any character after a backslash is taken literally, so hand-edited files
    with extra escapes still load. ``\\n`` is the one escape that maps to a
    different character.
    """
    parts: List[str] = []
    cur: List[str] = []
    esc = False
    for c in line:
        if esc:
            cur.append("\n" if c == "n" else c)
            esc = False
            continue
        if c == ESCAPE:
            esc = True
            continue
        if c == DELIMITER:
            parts.append("".join(cur))
            cur = []
            continue
        cur.append(c)
    parts.append("".join(cur))
    return parts


def decode_record(line: str) -> Game:
    parts = split_line(line)
    if len(parts) < FIELD_COUNT:
        raise DecodeError(f"expected {FIELD_COUNT} fields, got {len(parts)}: {line!r}")
    name, path, args = parts[:FIELD_COUNT]
    return Game(name=name, path=path, args=args)

"""
Opening classification from PGN header tags.

Name resolution order: [Opening] tag (plus a differing [Variation]), then the
ECO table name for the code, then the first moves of the game. Family collapse
folds named variations into their base opening for grouping.
"""

import re
from collections.abc import Callable

from eco_table import OPENING_FAMILIES, opening_name
from models import ClassifiedOpening

ECO_TAG = re.compile(r'\[ECO "([^"]+)"\]')
OPENING_TAG = re.compile(r'\[Opening "([^"]+)"\]')
VARIATION_TAG = re.compile(r'\[Variation "([^"]+)"\]')

FALLBACK_MOVE_TOKENS = 8


def _tag(pattern: re.Pattern, pgn: str) -> str | None:
    match = pattern.search(pgn)
    return match.group(1) if match else None


def name_from_opening_tag(pgn: str, code: str | None) -> str | None:
    name = _tag(OPENING_TAG, pgn)
    if name is None:
        return None
    variation = _tag(VARIATION_TAG, pgn)
    if variation and variation != name:
        name = f"{name}: {variation}"
    return name


def name_from_eco_code(pgn: str, code: str | None) -> str | None:
    return opening_name(code) if code else None


def name_from_moves(pgn: str, code: str | None) -> str | None:
    """Synthesize "Opening: e4 e5 ..." from the first tokens of the move list."""
    move_line = next(
        (line.strip() for line in pgn.split("\n") if line.strip() and not line.startswith("[")),
        None,
    )
    if not move_line:
        return None
    first_moves = " ".join(move_line.split()[:FALLBACK_MOVE_TOKENS])
    cleaned = re.sub(r"\s+", " ", re.sub(r"\d+\.", "", first_moves)).strip()
    return f"Opening: {cleaned}" if cleaned else None


NAME_RESOLVERS: list[Callable[[str, str | None], str | None]] = [
    name_from_opening_tag,
    name_from_eco_code,
    name_from_moves,
]


def classify_opening(pgn: str | None, eco: str | None = None) -> ClassifiedOpening | None:
    """
    Identify the opening of one game. `eco` is used when the PGN carries no ECO
    tag. Returns None when nothing usable is present.
    """
    pgn = pgn or ""
    code = _tag(ECO_TAG, pgn) or eco
    for resolve in NAME_RESOLVERS:
        name = resolve(pgn, code)
        if name:
            return ClassifiedOpening(name=name, code=code)
    return None


def family_exact(name: str) -> str | None:
    return OPENING_FAMILIES.get(name)


def family_known_prefix(name: str) -> str | None:
    """Recognise unlisted variations of a listed family."""
    for base in OPENING_FAMILIES.values():
        if base.split(":")[0] in name and name != base:
            return base
    return None


def family_before_colon(name: str) -> str | None:
    index = name.find(":")
    if index > 0:
        return name[:index].strip()
    return None


FAMILY_RESOLVERS: list[Callable[[str], str | None]] = [
    family_exact,
    family_known_prefix,
    family_before_colon,
]


def base_opening_name(name: str) -> str:
    """Collapse a classified opening name to its family name."""
    for resolve in FAMILY_RESOLVERS:
        family = resolve(name)
        if family:
            return family
    return name

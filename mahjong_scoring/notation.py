"""
Tile Notation Parser

Compact notation used by the CLI and the tests:

    123m456p789s11z      digits followed by a suit letter
    东南西北白发中        honor characters, one tile each
    [555z] [234s]        declared (open) set
    (1111s)              concealed quad

Suit letters: m/万 man, p/筒 pin, s/条 sou, z/字 honors (1-4 winds,
5-7 white/green/red), f/花 flowers (1-4 seasons, 5-8 plants).
"""

from typing import List, Tuple

from .errors import ParseError
from .melds import ExposedSet, SetKind
from .tiles import Tile, TileSuit

SUIT_SYMBOLS = {
    "m": TileSuit.MAN, "万": TileSuit.MAN, "萬": TileSuit.MAN,
    "p": TileSuit.PIN, "筒": TileSuit.PIN, "饼": TileSuit.PIN,
    "s": TileSuit.SOU, "条": TileSuit.SOU, "索": TileSuit.SOU,
    "z": TileSuit.HONOR, "字": TileSuit.HONOR,
    "f": TileSuit.FLOWER, "花": TileSuit.FLOWER,
}

HONOR_SYMBOLS = {
    "东": 1, "東": 1, "南": 2, "西": 3, "北": 4,
    "白": 5, "发": 6, "發": 6, "中": 7,
}

GROUP_CLOSERS = {"[": "]", "(": ")"}


def _parse_run(text: str, start: int, end: int) -> List[Tile]:
    """Parse tiles in text[start:end]; no set brackets allowed"""
    tiles: List[Tile] = []
    pending: List[Tuple[int, int]] = []  # (digit, position)

    for pos in range(start, end):
        ch = text[pos]
        if ch.isspace():
            continue
        if ch.isdigit():
            pending.append((int(ch), pos))
        elif ch in SUIT_SYMBOLS:
            if not pending:
                raise ParseError(f"Suit symbol {ch!r} without ranks", text, pos)
            suit = SUIT_SYMBOLS[ch]
            for rank, digit_pos in pending:
                try:
                    tiles.append(Tile(suit, rank))
                except ValueError as e:
                    raise ParseError(str(e), text, digit_pos) from e
            pending = []
        elif ch in HONOR_SYMBOLS:
            if pending:
                raise ParseError("Ranks without a suit symbol", text, pending[0][1])
            tiles.append(Tile(TileSuit.HONOR, HONOR_SYMBOLS[ch]))
        else:
            raise ParseError(f"Unknown symbol {ch!r}", text, pos)

    if pending:
        raise ParseError("Ranks without a suit symbol", text, pending[0][1])
    return tiles


def _build_set(tiles: List[Tile], concealed: bool, text: str, pos: int) -> ExposedSet:
    """Infer the set kind from its tiles"""
    tiles = sorted(tiles)
    identical = len(set(tiles)) == 1
    try:
        if concealed:
            if len(tiles) != 4 or not identical:
                raise ParseError("Only a quad can be declared concealed", text, pos)
            return ExposedSet(SetKind.QUAD, tuple(tiles), is_concealed=True)
        if identical and len(tiles) == 4:
            return ExposedSet(SetKind.QUAD, tuple(tiles))
        if identical and len(tiles) == 3:
            return ExposedSet(SetKind.TRIPLET, tuple(tiles))
        return ExposedSet(SetKind.SEQUENCE, tuple(tiles))
    except ValueError as e:
        if isinstance(e, ParseError):
            raise
        raise ParseError(f"Not a valid set: {e}", text, pos) from e


def parse_tiles(text: str) -> List[Tile]:
    """
    Parse a run of tiles such as "123m456p789s11z".

    Raises:
        ParseError: unknown symbol, ranks without a suit, or a rank out of range
    """
    return _parse_run(text, 0, len(text))


def parse_hand(text: str) -> Tuple[List[Tile], List[ExposedSet]]:
    """
    Parse concealed tiles and declared sets, e.g. "123m456p11z [555z] (1111s)".

    Returns:
        Tuple of (concealed tiles, declared sets)

    Raises:
        ParseError: malformed notation or a bracket group that is not a set
    """
    concealed: List[Tile] = []
    exposed: List[ExposedSet] = []

    pos = 0
    run_start = 0
    while pos < len(text):
        ch = text[pos]
        if ch in GROUP_CLOSERS:
            concealed.extend(_parse_run(text, run_start, pos))
            close = text.find(GROUP_CLOSERS[ch], pos + 1)
            if close == -1:
                raise ParseError(f"Unclosed {ch!r}", text, pos)
            group = _parse_run(text, pos + 1, close)
            exposed.append(_build_set(group, ch == "(", text, pos))
            pos = close + 1
            run_start = pos
            continue
        if ch in ("]", ")"):
            raise ParseError(f"Unmatched {ch!r}", text, pos)
        pos += 1

    concealed.extend(_parse_run(text, run_start, len(text)))
    return concealed, exposed


def format_tiles(tiles: List[Tile]) -> str:
    """Inverse of parse_tiles: group ranks by suit, suits in index order"""
    parts = []
    by_suit = {}
    for tile in sorted(tiles):
        by_suit.setdefault(tile.suit, []).append(str(tile.rank))
    for suit, letter in ((TileSuit.MAN, "m"), (TileSuit.PIN, "p"), (TileSuit.SOU, "s"),
                         (TileSuit.HONOR, "z"), (TileSuit.FLOWER, "f")):
        if suit in by_suit:
            parts.append("".join(by_suit[suit]) + letter)
    return "".join(parts)

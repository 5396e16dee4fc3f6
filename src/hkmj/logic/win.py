"""
Win detection and hand decomposition.

A standard winning hand is four sets plus one pair, where melds already
exposed count toward the four sets. The concealed part is decomposed by a
backtracking search over (suit, value) counts in display order: at each key
try the pair, then a pung, then a chow starting at that key. Every branch
works on its own copy of the counts.

Seven Pairs and Thirteen Orphans are checked before the standard search and
need an untouched 14-tile concealed hand.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from hkmj.logic.enums import SetKind, SpecialHand
from hkmj.logic.melds import Meld
from hkmj.logic.tiles import ORPHAN_KEYS, Tile, TileKey, count_by_key, key_sort_order

if TYPE_CHECKING:
    from collections.abc import Sequence

WINNING_HAND_SIZE = 14
SEVEN_PAIRS_COUNT = 7
CHOW_MAX_START_VALUE = 7
SETS_PER_HAND = 4


class DecomposedSet(BaseModel):
    """A set found in the concealed tiles. For chows, key is the lowest tile."""

    model_config = ConfigDict(frozen=True)

    kind: SetKind
    key: TileKey

    @property
    def keys(self) -> tuple[TileKey, ...]:
        if self.kind == SetKind.CHOW:
            return self.key, self.key.offset(1), self.key.offset(2)
        return self.key, self.key, self.key


class StandardDecomposition(BaseModel):
    """Pair + concealed sets + exposed/declared melds."""

    model_config = ConfigDict(frozen=True)

    pair: TileKey
    sets: tuple[DecomposedSet, ...]
    melds: tuple[Meld, ...] = ()

    @property
    def set_shapes(self) -> list[tuple[SetKind, TileKey]]:
        """All four sets as (kind, key), concealed sets first, kongs counted as pungs."""
        return [(s.kind, s.key) for s in self.sets] + [(m.set_kind, m.key) for m in self.melds]


class SpecialDecomposition(BaseModel):
    """Whole-hand special shape holding the 14 concealed tiles."""

    model_config = ConfigDict(frozen=True)

    kind: SpecialHand
    tiles: tuple[Tile, ...]


Decomposition = StandardDecomposition | SpecialDecomposition


def is_seven_pairs(tiles: Sequence[Tile]) -> bool:
    """Exactly 7 distinct keys, each present exactly twice."""
    counts = count_by_key(tiles)
    return len(counts) == SEVEN_PAIRS_COUNT and all(c == 2 for c in counts.values())


def is_thirteen_orphans(tiles: Sequence[Tile]) -> bool:
    """All 13 terminal and honour types present, one of them doubled."""
    if len(tiles) != WINNING_HAND_SIZE or not all(t.is_terminal_or_honour for t in tiles):
        return False
    counts = count_by_key(tiles)
    if set(counts) != set(ORPHAN_KEYS):
        return False
    return sorted(counts.values()).count(2) == 1


def _special_shape(concealed: Sequence[Tile], melds: Sequence[Meld]) -> SpecialHand | None:
    if melds or len(concealed) != WINNING_HAND_SIZE:
        return None
    if is_seven_pairs(concealed):
        return SpecialHand.SEVEN_PAIRS
    if is_thirteen_orphans(concealed):
        return SpecialHand.THIRTEEN_ORPHANS
    return None


def _search(
    keys: list[TileKey],
    counts: dict[TileKey, int],
    index: int,
    pair: TileKey | None,
) -> tuple[TileKey, list[DecomposedSet]] | None:
    """Find a pair + sets decomposition of counts, trying keys from index onward."""
    while index < len(keys) and counts[keys[index]] == 0:
        index += 1
    if index == len(keys):
        return (pair, []) if pair is not None else None

    key = keys[index]
    count = counts[key]

    if pair is None and count >= 2:
        found = _search(keys, {**counts, key: count - 2}, index, key)
        if found is not None:
            return found

    if count >= 3:
        found = _search(keys, {**counts, key: count - 3}, index, pair)
        if found is not None:
            found_pair, sets = found
            return found_pair, [DecomposedSet(kind=SetKind.PUNG, key=key), *sets]

    if key.is_number_suit and key.value <= CHOW_MAX_START_VALUE:
        second, third = key.offset(1), key.offset(2)
        if counts.get(second, 0) > 0 and counts.get(third, 0) > 0:
            remaining = {**counts, key: count - 1, second: counts[second] - 1, third: counts[third] - 1}
            found = _search(keys, remaining, index, pair)
            if found is not None:
                found_pair, sets = found
                return found_pair, [DecomposedSet(kind=SetKind.CHOW, key=key), *sets]

    return None


def find_standard_sets(tiles: Sequence[Tile]) -> tuple[TileKey, list[DecomposedSet]] | None:
    """
    Decompose tiles into exactly one pair plus sets.

    Returns (pair_key, sets) or None when no decomposition consumes every tile.
    """
    counts = dict(count_by_key(tiles))
    keys = sorted(counts, key=key_sort_order)
    return _search(keys, counts, 0, None)


def win_decomposition(concealed: Sequence[Tile], melds: Sequence[Meld]) -> Decomposition | None:
    """
    Return the decomposition used for scoring, or None if the hand is not complete.

    Special shapes take precedence over a standard decomposition of the same tiles.
    """
    special = _special_shape(concealed, melds)
    if special is not None:
        return SpecialDecomposition(kind=special, tiles=tuple(concealed))

    found = find_standard_sets(concealed)
    if found is None:
        return None
    pair, sets = found
    if len(sets) + len(melds) != SETS_PER_HAND:
        return None
    return StandardDecomposition(pair=pair, sets=tuple(sets), melds=tuple(melds))


def is_winning_hand(concealed: Sequence[Tile], melds: Sequence[Meld]) -> bool:
    """Check if the concealed tiles plus melds form a complete hand."""
    return win_decomposition(concealed, melds) is not None

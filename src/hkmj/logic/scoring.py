"""
Fan scoring for Hong Kong Mahjong.

Rules are applied in a fixed order. Maximal hands (13 fan) short-circuit;
everything else accumulates and the total is capped at MAX_FAN.
"""

from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from hkmj.logic.enums import DRAGON_FAN_RULES, FanRule, SetKind, SpecialHand, Suit
from hkmj.logic.settings import MAX_FAN, POINTS_FAN_CAP
from hkmj.logic.tiles import TERMINAL_VALUES, Tile
from hkmj.logic.win import SpecialDecomposition, StandardDecomposition

if TYPE_CHECKING:
    from collections.abc import Sequence

    from hkmj.logic.hand import Hand

SEVEN_PAIRS_FAN = 4
ALL_PUNGS_FAN = 3
MIXED_FLUSH_FAN = 3
CLEAN_FLUSH_FAN = 7
SMALL_THREE_DRAGONS_FAN = 4
BIG_THREE_DRAGONS_FAN = 8
SMALL_FOUR_WINDS_FAN = 6
BONUS_SET_FAN = 2
BONUS_SET_SIZE = 4
ALL_BONUS_TILES = 8

NINE_GATES_TERMINAL_COUNT = 3


class ScoringContext(BaseModel):
    """Situation of the win that the tiles alone cannot tell."""

    model_config = ConfigDict(frozen=True)

    seat_wind: int
    round_wind: int
    self_drawn: bool = False
    is_last_tile: bool = False
    is_kong_draw: bool = False
    minimum_fan: int = 1


class FanEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    rule: FanRule
    fan: int


class ScoringResult(BaseModel):
    """Total fan (capped at 13) and the ordered rule breakdown."""

    model_config = ConfigDict(frozen=True)

    total_fan: int = 0
    breakdown: tuple[FanEntry, ...] = ()

    def has_rule(self, rule: FanRule) -> bool:
        return any(entry.rule == rule for entry in self.breakdown)


def meets_minimum(total_fan: int, minimum_fan: int) -> bool:
    """A win counts only when it reaches the table minimum."""
    return total_fan >= minimum_fan


def fan_to_points(fan: int) -> int:
    """Base points: 2 ** fan, capped at the 10-fan tier (1024)."""
    return 2 ** min(fan, POINTS_FAN_CAP)


def _maximal(rule: FanRule, breakdown: list[FanEntry] | None = None) -> ScoringResult:
    entries = [*(breakdown or []), FanEntry(rule=rule, fan=MAX_FAN)]
    return ScoringResult(total_fan=MAX_FAN, breakdown=tuple(entries))


def _finish(breakdown: list[FanEntry]) -> ScoringResult:
    total = sum(entry.fan for entry in breakdown)
    return ScoringResult(total_fan=min(total, MAX_FAN), breakdown=tuple(breakdown))


def _flush_entry(tiles: Sequence[Tile]) -> FanEntry | None:
    """Clean flush (one number suit only) or mixed flush (one number suit plus honours)."""
    number_suits = {t.suit for t in tiles if t.is_number_suit}
    if len(number_suits) != 1:
        return None
    if any(t.is_honour for t in tiles):
        return FanEntry(rule=FanRule.MIXED_FLUSH, fan=MIXED_FLUSH_FAN)
    return FanEntry(rule=FanRule.CLEAN_FLUSH, fan=CLEAN_FLUSH_FAN)


def _is_nine_gates(tiles: Sequence[Tile]) -> bool:
    """1112345678999 plus any one tile, all in a single number suit."""
    suits = {t.suit for t in tiles}
    if len(suits) != 1 or not tiles[0].is_number_suit:
        return False
    counts = Counter(t.value for t in tiles)
    if any(counts[v] < NINE_GATES_TERMINAL_COUNT for v in TERMINAL_VALUES):
        return False
    return all(counts[v] >= 1 for v in range(2, 9))


def _bonus_entries(bonus_tiles: Sequence[Tile], seat_wind: int) -> list[FanEntry]:
    flowers = [t for t in bonus_tiles if t.is_flower]
    seasons = [t for t in bonus_tiles if t.is_season]
    entries: list[FanEntry] = []
    if len(flowers) == BONUS_SET_SIZE:
        entries.append(FanEntry(rule=FanRule.ALL_FLOWERS, fan=BONUS_SET_FAN))
    if any(t.value == seat_wind for t in flowers):
        entries.append(FanEntry(rule=FanRule.SEAT_FLOWER, fan=1))
    if len(seasons) == BONUS_SET_SIZE:
        entries.append(FanEntry(rule=FanRule.ALL_SEASONS, fan=BONUS_SET_FAN))
    if any(t.value == seat_wind for t in seasons):
        entries.append(FanEntry(rule=FanRule.SEAT_SEASON, fan=1))
    if len(bonus_tiles) == ALL_BONUS_TILES:
        entries.append(FanEntry(rule=FanRule.EIGHT_BONUS_TILES, fan=MAX_FAN))
    return entries


def _score_seven_pairs(hand: Hand, decomp: SpecialDecomposition, context: ScoringContext) -> ScoringResult:
    breakdown = [FanEntry(rule=FanRule.SEVEN_PAIRS, fan=SEVEN_PAIRS_FAN)]
    if all(t.is_honour for t in decomp.tiles):
        return _maximal(FanRule.ALL_HONOURS, breakdown)
    flush = _flush_entry(decomp.tiles)
    if flush is not None:
        breakdown.append(flush)
    if context.self_drawn:
        breakdown.append(FanEntry(rule=FanRule.SELF_DRAWN, fan=1))
    if len(hand.bonus_tiles) == ALL_BONUS_TILES:
        breakdown.append(FanEntry(rule=FanRule.EIGHT_BONUS_TILES, fan=MAX_FAN))
    return _finish(breakdown)


def _score_standard(hand: Hand, decomp: StandardDecomposition, context: ScoringContext) -> ScoringResult:
    all_tiles = hand.all_tiles()

    if all(t.is_honour for t in all_tiles):
        return _maximal(FanRule.ALL_HONOURS)
    if not hand.melds and _is_nine_gates(all_tiles):
        return _maximal(FanRule.NINE_GATES)

    shapes = decomp.set_shapes
    pung_keys = [key for kind, key in shapes if kind == SetKind.PUNG]
    breakdown: list[FanEntry] = []

    if len(pung_keys) == len(shapes):
        breakdown.append(FanEntry(rule=FanRule.ALL_PUNGS, fan=ALL_PUNGS_FAN))

    flush = _flush_entry(all_tiles)
    if flush is not None:
        breakdown.append(flush)

    if not pung_keys and not hand.melds:
        breakdown.append(FanEntry(rule=FanRule.PING_HU, fan=1))

    breakdown.extend(
        FanEntry(rule=DRAGON_FAN_RULES[key.value], fan=1) for key in pung_keys if key.suit == Suit.DRAGON
    )
    breakdown.extend(
        FanEntry(rule=FanRule.SEAT_WIND, fan=1)
        for key in pung_keys
        if key.suit == Suit.WIND and key.value == context.seat_wind
    )
    breakdown.extend(
        FanEntry(rule=FanRule.ROUND_WIND, fan=1)
        for key in pung_keys
        if key.suit == Suit.WIND and key.value == context.round_wind
    )

    if context.self_drawn:
        breakdown.append(FanEntry(rule=FanRule.SELF_DRAWN, fan=1))
    if not hand.melds and not context.self_drawn:
        breakdown.append(FanEntry(rule=FanRule.CONCEALED_HAND, fan=1))
    if context.is_last_tile:
        breakdown.append(FanEntry(rule=FanRule.LAST_TILE, fan=1))
    if context.is_kong_draw:
        breakdown.append(FanEntry(rule=FanRule.KONG_REPLACEMENT, fan=1))

    dragon_sets = sum(1 for key in pung_keys if key.suit == Suit.DRAGON)
    if dragon_sets == 2 and decomp.pair.suit == Suit.DRAGON:
        breakdown.append(FanEntry(rule=FanRule.SMALL_THREE_DRAGONS, fan=SMALL_THREE_DRAGONS_FAN))
    elif dragon_sets == 3:
        breakdown.append(FanEntry(rule=FanRule.BIG_THREE_DRAGONS, fan=BIG_THREE_DRAGONS_FAN))

    wind_sets = sum(1 for key in pung_keys if key.suit == Suit.WIND)
    if wind_sets == 3 and decomp.pair.suit == Suit.WIND:
        breakdown.append(FanEntry(rule=FanRule.SMALL_FOUR_WINDS, fan=SMALL_FOUR_WINDS_FAN))
    elif wind_sets == 4:
        breakdown.append(FanEntry(rule=FanRule.BIG_FOUR_WINDS, fan=MAX_FAN))

    breakdown.extend(_bonus_entries(hand.bonus_tiles, context.seat_wind))
    return _finish(breakdown)


def calculate(hand: Hand, context: ScoringContext) -> ScoringResult:
    """
    Score a complete hand.

    Returns an empty 0-fan result when the hand has no winning decomposition.
    """
    decomp = hand.win_decomposition()
    if decomp is None:
        return ScoringResult()
    if isinstance(decomp, SpecialDecomposition):
        if decomp.kind == SpecialHand.THIRTEEN_ORPHANS:
            return _maximal(FanRule.THIRTEEN_ORPHANS)
        return _score_seven_pairs(hand, decomp, context)
    return _score_standard(hand, decomp, context)

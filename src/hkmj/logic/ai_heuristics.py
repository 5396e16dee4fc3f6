"""
Hand and table heuristics shared by the AI difficulty tiers.

Everything here is a pure function of a Hand and a TableView.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from hkmj.logic.enums import NUMBER_SUITS, MeldKind, Suit
from hkmj.logic.scoring import ScoringContext, calculate, meets_minimum
from hkmj.logic.tiles import DRAGON_KEYS, count_by_key

if TYPE_CHECKING:
    from hkmj.logic.hand import Hand
    from hkmj.logic.tiles import Tile, TileKey
    from hkmj.logic.types import TableView

# tile_value weights
TRIPLET_VALUE = 8
PAIR_VALUE = 4
NEIGHBOUR_VALUE = 3
GAP_VALUE = 1
TERMINAL_PENALTY = 1
DRAGON_VALUE = 2

# danger detection
DANGEROUS_SUIT_TILES = 9
DANGEROUS_HONOUR_SETS = 2
TILES_PER_MELD_ESTIMATE = 3

# flush protection
DOMINANT_SUIT_TILES = 7
HIGH_MINIMUM_FAN = 3
LOCKED_SUIT_THRESHOLD = 3
LOCKED_SUIT_THRESHOLD_HIGH_MINIMUM = 6
DOMINANT_SUIT_THRESHOLD = 3

# hand potential
BONUS_SET_SIZE = 4
BONUS_SET_FAN = 2
ALL_PUNGS_SHAPES = 4
ALL_PUNGS_FAN = 3
SEVEN_PAIRS_MIN_PAIRS = 5
SEVEN_PAIRS_FAN = 4


@dataclass(frozen=True)
class DangerInfo:
    """Suits and honour keys another player looks close to a big hand in."""

    suits: frozenset[Suit] = field(default_factory=frozenset)
    honours: frozenset[TileKey] = field(default_factory=frozenset)
    players: tuple[int, ...] = ()

    def is_dangerous(self, tile: Tile) -> bool:
        return tile.suit in self.suits or tile.key in self.honours


def tile_value(tile: Tile, hand: Hand) -> int:
    """Usefulness of keeping tile in hand (higher = keep)."""
    value = 0
    count = hand.count_key(tile.key)
    if count >= 3:
        value += TRIPLET_VALUE
    elif count >= 2:
        value += PAIR_VALUE

    if tile.is_number_suit:
        for delta, weight in ((-1, NEIGHBOUR_VALUE), (1, NEIGHBOUR_VALUE), (-2, GAP_VALUE), (2, GAP_VALUE)):
            if hand.has_key(tile.key.offset(delta)):
                value += weight
        if tile.is_terminal:
            value -= TERMINAL_PENALTY

    if tile.is_dragon:
        value += DRAGON_VALUE
    return value


def dangerous_conditions(view: TableView | None) -> DangerInfo:
    """
    Scan every player's melds for threatening exposures.

    A number suit with 9+ exposed tiles (three melds' worth) flags that suit;
    two or more honour pungs/kongs flag all three dragons.
    """
    if view is None:
        return DangerInfo()

    suits: set[Suit] = set()
    honours: set[TileKey] = set()
    players: list[int] = []
    for player in view.players:
        suit_tiles: Counter[Suit] = Counter()
        honour_sets = 0
        for meld in player.melds:
            if meld.key.is_number_suit:
                suit_tiles[meld.key.suit] += TILES_PER_MELD_ESTIMATE
            elif meld.key.is_honour and meld.kind != MeldKind.CHOW:
                honour_sets += 1

        for suit, exposed in suit_tiles.items():
            if exposed >= DANGEROUS_SUIT_TILES:
                suits.add(suit)
                players.append(player.seat)

        if honour_sets >= DANGEROUS_HONOUR_SETS:
            honours.update(DRAGON_KEYS)
            players.append(player.seat)

    return DangerInfo(suits=frozenset(suits), honours=frozenset(honours), players=tuple(players))


def suit_distribution(hand: Hand) -> Counter[Suit]:
    """Tiles per suit, counting each meld as three of its suit."""
    dist: Counter[Suit] = Counter(t.suit for t in hand.concealed)
    for meld in hand.melds:
        dist[meld.key.suit] += TILES_PER_MELD_ESTIMATE
    return dist


def estimate_hand_potential(hand: Hand, seat_wind: int, round_wind: int) -> int:
    """
    Rough fan the hand is likely to reach.

    Confirmed bonus-tile fan and honour pungs (exposed or concealed triplets),
    raised to 3 when All Pungs looks reachable and to 4 for a Seven Pairs
    candidate.
    """
    fan = 0
    flowers = [t for t in hand.bonus_tiles if t.is_flower]
    seasons = [t for t in hand.bonus_tiles if t.is_season]
    if len(flowers) == BONUS_SET_SIZE:
        fan += BONUS_SET_FAN
    if len(seasons) == BONUS_SET_SIZE:
        fan += BONUS_SET_FAN
    if any(t.value == seat_wind for t in flowers):
        fan += 1
    if any(t.value == seat_wind for t in seasons):
        fan += 1

    counts = count_by_key(hand.concealed)
    pung_keys = [m.key for m in hand.melds if m.kind != MeldKind.CHOW]
    pung_keys.extend(key for key, count in counts.items() if count >= 3)

    for key in pung_keys:
        if key.suit == Suit.DRAGON:
            fan += 1
        elif key.suit == Suit.WIND:
            if key.value == seat_wind:
                fan += 1
            if key.value == round_wind:
                fan += 1

    pairs = sum(1 for count in counts.values() if count == 2)
    if len(pung_keys) + pairs >= ALL_PUNGS_SHAPES:
        fan = max(fan, ALL_PUNGS_FAN)
    if not hand.melds and pairs >= SEVEN_PAIRS_MIN_PAIRS:
        fan = max(fan, SEVEN_PAIRS_FAN)
    return fan


def should_protect_flush(hand: Hand, tile: Tile, view: TableView) -> bool:
    """
    Decline a claim that would pollute a suit the hand is building toward.

    Honours never pollute (they can still make a mixed flush). Once a number
    suit meld is exposed that suit is locked; before that a suit holding 7+
    tiles is treated as the target. Breaking away is allowed only when the
    hand already promises enough fan.
    """
    if tile.is_honour:
        return False

    meld_suits = [m.key.suit for m in hand.melds if m.key.suit in NUMBER_SUITS]
    if meld_suits:
        if tile.suit == meld_suits[0]:
            return False
        potential = estimate_hand_potential(hand, view.seat_wind, view.round_wind)
        threshold = (
            LOCKED_SUIT_THRESHOLD_HIGH_MINIMUM if view.minimum_fan >= HIGH_MINIMUM_FAN else LOCKED_SUIT_THRESHOLD
        )
        return potential < threshold

    dist = suit_distribution(hand)
    dominant = next((suit for suit in NUMBER_SUITS if dist[suit] >= DOMINANT_SUIT_TILES), None)
    if dominant is not None and tile.suit != dominant:
        return estimate_hand_potential(hand, view.seat_wind, view.round_wind) < DOMINANT_SUIT_THRESHOLD
    return False


def chow_breaks_suit_lock(hand: Hand, tile: Tile, minimum_fan: int) -> bool:
    """
    At high-minimum tables, refuse a chow outside the suit already punged.

    Applies once the hand has an exposed number-suit pung or kong; the
    primary suit is the suit of the first number-suit meld.
    """
    if minimum_fan < HIGH_MINIMUM_FAN or not tile.is_number_suit:
        return False
    has_number_pung = any(m.kind != MeldKind.CHOW and m.key.is_number_suit for m in hand.melds)
    if not has_number_pung:
        return False
    primary = next(m.key.suit for m in hand.melds if m.key.is_number_suit)
    return tile.suit != primary


def can_win_with_discard(hand: Hand, tile: Tile, view: TableView) -> bool:
    """Check whether claiming tile completes a hand worth at least the table minimum."""
    if not hand.can_win_with(tile):
        return False
    context = ScoringContext(seat_wind=view.seat_wind, round_wind=view.round_wind, minimum_fan=view.minimum_fan)
    result = calculate(hand.with_tile(tile), context)
    return meets_minimum(result.total_fan, view.minimum_fan)

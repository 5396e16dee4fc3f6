"""
AI player decision making for the three computer seats.

Easy plays randomly and only claims wins and the odd pung. Medium discards
its least useful tiles and claims aggressively unless that would break a
flush it is building. Hard plays defensively: it prefers tiles already seen
in discard piles, avoids feeding suits another player is collecting and
picks its pungs.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from hkmj.logic.ai_heuristics import (
    can_win_with_discard,
    chow_breaks_suit_lock,
    dangerous_conditions,
    should_protect_flush,
    tile_value,
)
from hkmj.logic.enums import ClaimAction, Difficulty, KongType, MeldKind

if TYPE_CHECKING:
    from hkmj.logic.hand import Hand
    from hkmj.logic.rng import TableRng
    from hkmj.logic.tiles import Tile, TileKey
    from hkmj.logic.types import TableView

EASY_PUNG_CHANCE = 0.5
MEDIUM_CHOW_CHANCE = 0.6
HARD_PUNG_CHANCE = 0.4
HARD_CHOW_CHANCE = 0.3

MEDIUM_DANGER_PENALTY = 15
MEDIUM_DISCARD_POOL = 3

HARD_SAFE_BONUS = 15
HARD_SAFE_BONUS_PER_COPY = 5
HARD_DANGEROUS_SUIT_PENALTY = 50
HARD_DANGEROUS_HONOUR_PENALTY = 40
HARD_LOW_WALL = 15
HARD_LOW_WALL_NUMBER_PENALTY = 10
HARD_PUNG_MELDS_FOR_ALL_PUNGS = 2


class AIPlayer:
    """
    Difficulty-tiered decisions for one computer seat.

    Coin flips go through the table rng so a seeded match replays exactly.
    """

    def __init__(self, difficulty: Difficulty, rng: TableRng) -> None:
        self.difficulty = difficulty
        self.rng = rng

    # --- discards ---

    def choose_discard(self, hand: Hand, view: TableView) -> Tile:
        if not hand.concealed:
            raise ValueError("cannot select discard from empty hand")
        if self.difficulty == Difficulty.HARD:
            return self._discard_hard(hand, view)
        if self.difficulty == Difficulty.MEDIUM:
            return self._discard_medium(hand, view)
        return self.rng.choice(hand.concealed)

    def _discard_medium(self, hand: Hand, view: TableView) -> Tile:
        """Random pick among the three least useful tiles."""
        danger = dangerous_conditions(view)
        scored: list[tuple[int, Tile]] = []
        for tile in hand.concealed:
            score = tile_value(tile, hand)
            if danger.is_dangerous(tile):
                score -= MEDIUM_DANGER_PENALTY
            scored.append((score, tile))
        scored.sort(key=lambda item: item[0])
        pool = [tile for _, tile in scored[:MEDIUM_DISCARD_POOL]]
        return self.rng.choice(pool)

    def _discard_hard(self, hand: Hand, view: TableView) -> Tile:
        """Highest discardability score; the first tile wins ties."""
        danger = dangerous_conditions(view)
        best_tile = hand.concealed[0]
        best_score: int | None = None
        for tile in hand.concealed:
            score = -tile_value(tile, hand)
            seen = view.discard_count_of(tile.key)
            if seen > 0:
                score += HARD_SAFE_BONUS + seen * HARD_SAFE_BONUS_PER_COPY
            if tile.suit in danger.suits:
                score -= HARD_DANGEROUS_SUIT_PENALTY
            if tile.key in danger.honours:
                score -= HARD_DANGEROUS_HONOUR_PENALTY
            if view.wall_remaining < HARD_LOW_WALL and tile.is_number_suit:
                score -= HARD_LOW_WALL_NUMBER_PENALTY
            if best_score is None or score > best_score:
                best_score = score
                best_tile = tile
        return best_tile

    # --- claims ---

    def decide_claim(self, hand: Hand, tile: Tile, *, can_chow: bool, view: TableView) -> ClaimAction | None:
        """
        Decide what to do with another player's discard.

        can_chow is True only for the seat right after the discarder.
        """
        if self.difficulty == Difficulty.HARD:
            return self._claim_hard(hand, tile, can_chow=can_chow, view=view)
        if self.difficulty == Difficulty.MEDIUM:
            return self._claim_medium(hand, tile, can_chow=can_chow, view=view)
        return self._claim_easy(hand, tile, view)

    def _claim_easy(self, hand: Hand, tile: Tile, view: TableView) -> ClaimAction | None:
        if can_win_with_discard(hand, tile, view):
            return ClaimAction.WIN
        if hand.can_pung(tile) and self.rng.random() < EASY_PUNG_CHANCE:
            return ClaimAction.PUNG
        return None

    def _claim_medium(self, hand: Hand, tile: Tile, *, can_chow: bool, view: TableView) -> ClaimAction | None:
        if can_win_with_discard(hand, tile, view):
            return ClaimAction.WIN
        if hand.can_kong_from_discard(tile):
            return ClaimAction.KONG
        if should_protect_flush(hand, tile, view):
            return None
        if hand.can_pung(tile):
            return ClaimAction.PUNG
        return self._maybe_chow(hand, tile, can_chow=can_chow, view=view, chance=MEDIUM_CHOW_CHANCE)

    def _claim_hard(self, hand: Hand, tile: Tile, *, can_chow: bool, view: TableView) -> ClaimAction | None:
        if can_win_with_discard(hand, tile, view):
            return ClaimAction.WIN
        if hand.can_kong_from_discard(tile):
            return ClaimAction.KONG
        if should_protect_flush(hand, tile, view):
            return None

        if hand.can_pung(tile) and self._hard_wants_pung(hand, tile, view):
            return ClaimAction.PUNG
        return self._maybe_chow(hand, tile, can_chow=can_chow, view=view, chance=HARD_CHOW_CHANCE)

    def _hard_wants_pung(self, hand: Hand, tile: Tile, view: TableView) -> bool:
        if tile.suit in dangerous_conditions(view).suits:
            return True
        if tile.is_dragon:
            return True
        if tile.is_wind and tile.value in (view.seat_wind, view.round_wind):
            return True
        pung_melds = sum(1 for m in hand.melds if m.kind != MeldKind.CHOW)
        if pung_melds >= HARD_PUNG_MELDS_FOR_ALL_PUNGS:
            return True
        return self.rng.random() < HARD_PUNG_CHANCE

    def _maybe_chow(
        self, hand: Hand, tile: Tile, *, can_chow: bool, view: TableView, chance: float
    ) -> ClaimAction | None:
        """Chow to intercept a dangerous suit, otherwise on a coin flip."""
        if not can_chow or not hand.chow_options(tile):
            return None
        if chow_breaks_suit_lock(hand, tile, view.minimum_fan):
            return None
        if tile.suit in dangerous_conditions(view).suits:
            return ClaimAction.CHOW
        if self.rng.random() < chance:
            return ClaimAction.CHOW
        return None

    def choose_chow_combo(self, combos: list[tuple[TileKey, TileKey]]) -> tuple[TileKey, TileKey]:
        """Take the lowest combination."""
        return combos[0]

    # --- own turn ---

    def decide_kong(self, hand: Hand) -> tuple[KongType, TileKey] | None:
        """Always declare: first concealed kong, else first added kong."""
        concealed = hand.concealed_kong_keys()
        if concealed:
            return KongType.CONCEALED, concealed[0]
        added = hand.added_kong_keys()
        if added:
            return KongType.ADDED, added[0]
        return None

"""
Per-seat hand: concealed tiles, melds, bonus tiles and discard pile.

Claim queries are pure. Meld execution removes the consumed concealed tiles
and raises InvalidMeldError when a required tile is missing, which only
happens if the matching query was skipped.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

from hkmj.logic.enums import MeldKind
from hkmj.logic.exceptions import InvalidDiscardError, InvalidMeldError
from hkmj.logic.melds import HAND_TILES_FOR_CONCEALED_KONG, HAND_TILES_FOR_EXPOSED_KONG, HAND_TILES_FOR_PUNG, Meld
from hkmj.logic.tiles import Tile, TileKey, count_by_key, key_sort_order, sort_tiles
from hkmj.logic.win import Decomposition, is_winning_hand, win_decomposition

if TYPE_CHECKING:
    from collections.abc import Iterable

# chow partner offsets relative to the claimed tile, in the order they are offered
CHOW_PARTNER_OFFSETS: tuple[tuple[int, int], ...] = ((-2, -1), (-1, 1), (1, 2))
MIN_NUMBER_VALUE = 1
MAX_NUMBER_VALUE = 9


@dataclass
class Hand:
    """Tiles owned by one seat for the current round."""

    seat: int
    concealed: list[Tile] = field(default_factory=list)
    melds: list[Meld] = field(default_factory=list)
    bonus_tiles: list[Tile] = field(default_factory=list)
    discards: list[Tile] = field(default_factory=list)

    # --- basic tile movement ---

    def set_initial(self, tiles: Iterable[Tile]) -> None:
        self.concealed = sort_tiles(tiles)

    def add_tile(self, tile: Tile) -> None:
        self.concealed = sort_tiles([*self.concealed, tile])

    def add_bonus(self, tile: Tile) -> None:
        self.bonus_tiles = sort_tiles([*self.bonus_tiles, tile])

    def remove_tile(self, tile: Tile) -> bool:
        """Remove this exact copy (by id). Returns False if it is not held."""
        for i, held in enumerate(self.concealed):
            if held.id == tile.id:
                del self.concealed[i]
                return True
        return False

    def take_by_key(self, key: TileKey) -> Tile | None:
        """Remove and return the first concealed tile with this key."""
        for i, held in enumerate(self.concealed):
            if held.key == key:
                return self.concealed.pop(i)
        return None

    def discard(self, tile: Tile) -> Tile:
        if not self.remove_tile(tile):
            raise InvalidDiscardError(f"seat {self.seat} does not hold tile {tile.id} ({tile})")
        self.discards.append(tile)
        return tile

    def remove_last_discard(self, tile: Tile) -> None:
        """Take a claimed tile back off this seat's discard pile."""
        for i in range(len(self.discards) - 1, -1, -1):
            if self.discards[i].id == tile.id:
                del self.discards[i]
                return

    def count_key(self, key: TileKey) -> int:
        return sum(1 for t in self.concealed if t.key == key)

    def has_key(self, key: TileKey) -> bool:
        return any(t.key == key for t in self.concealed)

    # --- claim queries ---

    def can_pung(self, tile: Tile) -> bool:
        return self.count_key(tile.key) >= HAND_TILES_FOR_PUNG

    def can_kong_from_discard(self, tile: Tile) -> bool:
        return self.count_key(tile.key) >= HAND_TILES_FOR_EXPOSED_KONG

    def chow_options(self, tile: Tile) -> list[tuple[TileKey, TileKey]]:
        """
        Partner key pairs that form a chow with tile.

        Offered in the order (v-2, v-1), (v-1, v+1), (v+1, v+2). Seat
        eligibility (only the player after the discarder) is checked by the
        caller.
        """
        if not tile.is_number_suit:
            return []
        combos: list[tuple[TileKey, TileKey]] = []
        for low, high in CHOW_PARTNER_OFFSETS:
            first, second = tile.key.offset(low), tile.key.offset(high)
            if first.value < MIN_NUMBER_VALUE or second.value > MAX_NUMBER_VALUE:
                continue
            if self.has_key(first) and self.has_key(second):
                combos.append((first, second))
        return combos

    def concealed_kong_keys(self) -> list[TileKey]:
        """Keys held four times in the concealed hand, in display order."""
        counts = count_by_key(self.concealed)
        return sorted(
            (key for key, count in counts.items() if count == HAND_TILES_FOR_CONCEALED_KONG), key=key_sort_order
        )

    def added_kong_keys(self) -> list[TileKey]:
        """Keys of exposed pungs whose fourth tile is in the concealed hand, in meld order."""
        return [m.key for m in self.melds if m.kind == MeldKind.PUNG and self.has_key(m.key)]

    # --- meld execution ---

    def _take_tiles(self, key: TileKey, count: int) -> list[Tile]:
        if self.count_key(key) < count:
            raise InvalidMeldError(f"seat {self.seat} needs {count} x {key.value} {key.suit.value}")
        taken: list[Tile] = []
        for _ in range(count):
            tile = self.take_by_key(key)
            if tile is not None:
                taken.append(tile)
        return taken

    def do_chow(self, tile: Tile, combo: tuple[TileKey, TileKey], source_player: int) -> Meld:
        if combo not in self.chow_options(tile):
            raise InvalidMeldError(f"seat {self.seat} cannot chow {tile} with {combo}")
        partners = [self._take_tiles(key, 1)[0] for key in combo]
        meld = Meld(kind=MeldKind.CHOW, tiles=tuple(sort_tiles([tile, *partners])), source_player=source_player)
        self.melds.append(meld)
        return meld

    def do_pung(self, tile: Tile, source_player: int) -> Meld:
        partners = self._take_tiles(tile.key, HAND_TILES_FOR_PUNG)
        meld = Meld(kind=MeldKind.PUNG, tiles=(tile, *partners), source_player=source_player)
        self.melds.append(meld)
        return meld

    def do_kong_exposed(self, tile: Tile, source_player: int) -> Meld:
        partners = self._take_tiles(tile.key, HAND_TILES_FOR_EXPOSED_KONG)
        meld = Meld(kind=MeldKind.EXPOSED_KONG, tiles=(tile, *partners), source_player=source_player)
        self.melds.append(meld)
        return meld

    def do_kong_concealed(self, key: TileKey) -> Meld:
        tiles = self._take_tiles(key, HAND_TILES_FOR_CONCEALED_KONG)
        meld = Meld(kind=MeldKind.CONCEALED_KONG, tiles=tuple(tiles))
        self.melds.append(meld)
        return meld

    def do_kong_added(self, key: TileKey) -> Meld:
        """Promote the exposed pung of key in place, keeping its source player."""
        for index, meld in enumerate(self.melds):
            if meld.kind == MeldKind.PUNG and meld.key == key:
                tile = self._take_tiles(key, 1)[0]
                promoted = meld.promote_to_added_kong(tile)
                self.melds[index] = promoted
                return promoted
        raise InvalidMeldError(f"seat {self.seat} has no pung of {key.value} {key.suit.value} to extend")

    # --- win queries ---

    def can_win(self) -> bool:
        return is_winning_hand(self.concealed, self.melds)

    def can_win_with(self, tile: Tile) -> bool:
        """Check whether adding tile would complete the hand, without mutating it."""
        return is_winning_hand([*self.concealed, tile], self.melds)

    def with_tile(self, tile: Tile) -> Hand:
        """Copy of this hand holding one extra concealed tile (for scoring a claim)."""
        return replace(
            self,
            concealed=sort_tiles([*self.concealed, tile]),
            melds=list(self.melds),
            bonus_tiles=list(self.bonus_tiles),
            discards=list(self.discards),
        )

    def win_decomposition(self) -> Decomposition | None:
        return win_decomposition(self.concealed, self.melds)

    def all_tiles(self) -> list[Tile]:
        """Concealed tiles plus every meld tile."""
        tiles = list(self.concealed)
        for meld in self.melds:
            tiles.extend(meld.tiles)
        return tiles

    def tile_count(self) -> int:
        """Tiles this seat holds in hand, melds and bonus pile."""
        return len(self.concealed) + sum(len(m.tiles) for m in self.melds) + len(self.bonus_tiles)

    @property
    def is_concealed(self) -> bool:
        """No melds of any kind."""
        return not self.melds

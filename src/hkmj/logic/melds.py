"""
Immutable meld representation.

A meld is created when a discard is claimed (chow, pung, exposed kong) or a
kong is declared from the hand. Melds never change afterwards except when a
pung is promoted to an added kong, which replaces the meld with a new one
holding the fourth tile.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from hkmj.logic.enums import MeldKind, SetKind
from hkmj.logic.tiles import Tile, TileKey

# concealed tiles a seat must hold to form each meld
HAND_TILES_FOR_PUNG = 2
HAND_TILES_FOR_EXPOSED_KONG = 3
HAND_TILES_FOR_CONCEALED_KONG = 4


class Meld(BaseModel):
    """
    A set of 3 or 4 tiles removed from the concealed hand.

    source_player is the seat whose discard supplied the claimed tile,
    None for concealed kongs.
    """

    model_config = ConfigDict(frozen=True)

    kind: MeldKind
    tiles: tuple[Tile, ...]
    source_player: int | None = None

    @property
    def key(self) -> TileKey:
        """Key of the first (lowest, for chows) tile."""
        return self.tiles[0].key

    @property
    def is_kong(self) -> bool:
        return self.kind.is_kong

    @property
    def is_pung_or_kong(self) -> bool:
        return self.kind != MeldKind.CHOW

    @property
    def set_kind(self) -> SetKind:
        """Shape of the meld as a scoring set: kongs count as pungs."""
        return SetKind.CHOW if self.kind == MeldKind.CHOW else SetKind.PUNG

    def promote_to_added_kong(self, tile: Tile) -> Meld:
        """Return the added kong formed by extending this pung with its fourth tile."""
        return self.model_copy(update={"kind": MeldKind.ADDED_KONG, "tiles": (*self.tiles, tile)})

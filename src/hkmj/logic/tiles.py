"""
Tile representation utilities for Hong Kong Mahjong.

144 tiles, ids assigned in this order:
  characters 1-9 (4 copies each): 0-35
  circles 1-9: 36-71
  bamboo 1-9: 72-107
  winds E, S, W, N: 108-123
  dragons red, green, white: 124-135
  flowers 1-4: 136-139
  seasons 1-4: 140-143
"""

from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING, NamedTuple

from pydantic import BaseModel, ConfigDict

from hkmj.logic.enums import BONUS_SUITS, HONOUR_SUITS, NUMBER_SUITS, Dragon, Suit, Wind

if TYPE_CHECKING:
    from collections.abc import Iterable

TOTAL_TILES = 144
COPIES_PER_TILE = 4
NUMBER_VALUES = range(1, 10)
BONUS_VALUES = range(1, 5)
TERMINAL_VALUES = (1, 9)

SUIT_ORDER: dict[Suit, int] = {
    Suit.CHARACTERS: 0,
    Suit.CIRCLES: 1,
    Suit.BAMBOO: 2,
    Suit.WIND: 3,
    Suit.DRAGON: 4,
    Suit.FLOWER: 5,
    Suit.SEASON: 6,
}

_DRAGON_NAMES = {Dragon.RED: "Red", Dragon.GREEN: "Green", Dragon.WHITE: "White"}
_FLOWER_NAMES = {1: "Plum", 2: "Orchid", 3: "Bamboo", 4: "Chrysanthemum"}
_SEASON_NAMES = {1: "Spring", 2: "Summer", 3: "Autumn", 4: "Winter"}


class TileKey(NamedTuple):
    """Grouping key for identical tiles: (suit, value)."""

    suit: Suit
    value: int

    @property
    def is_number_suit(self) -> bool:
        return self.suit in NUMBER_SUITS

    @property
    def is_honour(self) -> bool:
        return self.suit in HONOUR_SUITS

    @property
    def is_terminal(self) -> bool:
        return self.is_number_suit and self.value in TERMINAL_VALUES

    def offset(self, delta: int) -> TileKey:
        """Key of the tile `delta` steps along the same suit."""
        return TileKey(self.suit, self.value + delta)


def key_sort_order(key: TileKey) -> tuple[int, int]:
    return SUIT_ORDER[key.suit], key.value


class Tile(BaseModel):
    """
    One physical tile.

    Two tiles are interchangeable for every rule when their `key` matches;
    `id` only tells physical copies apart (e.g. which copy was discarded).
    """

    model_config = ConfigDict(frozen=True)

    suit: Suit
    value: int
    id: int

    @property
    def key(self) -> TileKey:
        return TileKey(self.suit, self.value)

    @property
    def is_number_suit(self) -> bool:
        return self.suit in NUMBER_SUITS

    @property
    def is_wind(self) -> bool:
        return self.suit == Suit.WIND

    @property
    def is_dragon(self) -> bool:
        return self.suit == Suit.DRAGON

    @property
    def is_honour(self) -> bool:
        return self.suit in HONOUR_SUITS

    @property
    def is_flower(self) -> bool:
        return self.suit == Suit.FLOWER

    @property
    def is_season(self) -> bool:
        return self.suit == Suit.SEASON

    @property
    def is_bonus(self) -> bool:
        return self.suit in BONUS_SUITS

    @property
    def is_terminal(self) -> bool:
        return self.is_number_suit and self.value in TERMINAL_VALUES

    @property
    def is_terminal_or_honour(self) -> bool:
        return self.is_terminal or self.is_honour

    @property
    def sort_key(self) -> tuple[int, int, int]:
        return SUIT_ORDER[self.suit], self.value, self.id

    def __str__(self) -> str:
        return tile_name(self.key)


def tile_name(key: TileKey) -> str:
    """English display name for a tile key."""
    if key.suit == Suit.WIND:
        return f"{Wind(key.value).name.title()} Wind"
    if key.suit == Suit.DRAGON:
        return f"{_DRAGON_NAMES[Dragon(key.value)]} Dragon"
    if key.suit == Suit.FLOWER:
        return f"{_FLOWER_NAMES[key.value]} Flower"
    if key.suit == Suit.SEASON:
        return f"{_SEASON_NAMES[key.value]} Season"
    return f"{key.value} {key.suit.value.title()}"


def create_all_tiles() -> list[Tile]:
    """Generate all 144 tiles in id order."""
    tiles: list[Tile] = []

    def add(suit: Suit, value: int) -> None:
        tiles.append(Tile(suit=suit, value=value, id=len(tiles)))

    for suit in NUMBER_SUITS:
        for value in NUMBER_VALUES:
            for _ in range(COPIES_PER_TILE):
                add(suit, value)
    for wind in Wind:
        for _ in range(COPIES_PER_TILE):
            add(Suit.WIND, int(wind))
    for dragon in Dragon:
        for _ in range(COPIES_PER_TILE):
            add(Suit.DRAGON, int(dragon))
    for suit in BONUS_SUITS:
        for value in BONUS_VALUES:
            add(suit, value)
    return tiles


def sort_tiles(tiles: Iterable[Tile]) -> list[Tile]:
    """Sort tiles into display order, keeping copies in id order."""
    return sorted(tiles, key=lambda t: t.sort_key)


def count_by_key(tiles: Iterable[Tile]) -> Counter[TileKey]:
    """Count tiles per (suit, value) key."""
    return Counter(t.key for t in tiles)


# the 13 terminal and honour types required for thirteen orphans
ORPHAN_KEYS: tuple[TileKey, ...] = (
    *(TileKey(suit, value) for suit in NUMBER_SUITS for value in TERMINAL_VALUES),
    *(TileKey(Suit.WIND, int(w)) for w in Wind),
    *(TileKey(Suit.DRAGON, int(d)) for d in Dragon),
)

DRAGON_KEYS: tuple[TileKey, ...] = tuple(TileKey(Suit.DRAGON, int(d)) for d in Dragon)

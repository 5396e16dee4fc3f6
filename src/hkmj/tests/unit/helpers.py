"""Shared builders for unit tests: tiles from short strings, hands, melds and a scripted rng.

Tile notation: digits followed by a suit letter, groups separated by spaces.
c = characters, o = circles, b = bamboo, w = wind (1 East .. 4 North),
d = dragon (1 red, 2 green, 3 white), f = flower, s = season.
"123c 55o 777d" is nine tiles.
"""

from itertools import count

from hkmj.logic.enums import MeldKind, Suit, Wind
from hkmj.logic.hand import Hand
from hkmj.logic.melds import Meld
from hkmj.logic.rng import SEED_BYTES, TableRng
from hkmj.logic.tiles import Tile, TileKey
from hkmj.logic.types import PlayerView, TableView

FIXED_SEED = "ab" * SEED_BYTES

_SUIT_LETTERS = {
    "c": Suit.CHARACTERS,
    "o": Suit.CIRCLES,
    "b": Suit.BAMBOO,
    "w": Suit.WIND,
    "d": Suit.DRAGON,
    "f": Suit.FLOWER,
    "s": Suit.SEASON,
}

# ids above the 144 real tiles so test tiles never collide with each other
_ids = count(1000)


def tiles(notation: str) -> list[Tile]:
    """Build tiles with fresh unique ids from compact notation."""
    result: list[Tile] = []
    for group in notation.split():
        suit = _SUIT_LETTERS[group[-1]]
        result.extend(Tile(suit=suit, value=int(digit), id=next(_ids)) for digit in group[:-1])
    return result


def tile(notation: str) -> Tile:
    (single,) = tiles(notation)
    return single


def key(notation: str) -> TileKey:
    return tile(notation).key


def meld(notation: str, kind: MeldKind = MeldKind.PUNG, source_player: int | None = 1) -> Meld:
    if kind == MeldKind.CONCEALED_KONG:
        source_player = None
    return Meld(kind=kind, tiles=tuple(tiles(notation)), source_player=source_player)


def make_hand(
    concealed: str = "",
    *,
    melds: list[Meld] | None = None,
    bonus: str = "",
    discards: str = "",
    seat: int = 0,
) -> Hand:
    hand = Hand(seat=seat)
    hand.set_initial(tiles(concealed))
    hand.melds = list(melds or [])
    hand.bonus_tiles = tiles(bonus)
    hand.discards = tiles(discards)
    return hand


def make_view(
    *,
    seat: int = 1,
    seat_wind: int = Wind.SOUTH,
    round_wind: int = Wind.EAST,
    minimum_fan: int = 1,
    wall_remaining: int = 80,
    discards: str = "",
    player_melds: dict[int, list[Meld]] | None = None,
) -> TableView:
    """Table view for AI decisions; player_melds maps seats to their exposed melds."""
    players = tuple(
        PlayerView(seat=s, seat_wind=(s % 4) + 1, score=10000, melds=tuple((player_melds or {}).get(s, [])))
        for s in range(4)
    )
    return TableView(
        seat=seat,
        seat_wind=seat_wind,
        round_wind=round_wind,
        dealer=0,
        minimum_fan=minimum_fan,
        wall_remaining=wall_remaining,
        all_discards=tuple(tiles(discards)),
        players=players,
    )


class ScriptedRng(TableRng):
    """
    Table rng with scripted dice and coin flips.

    Shuffles still come from the seeded generator. When a script runs out the
    real generator takes over.
    """

    def __init__(
        self, *, dice: list[int] | None = None, coins: list[float] | None = None, seed_hex=FIXED_SEED
    ):
        super().__init__(seed_hex)
        self.dice = list(dice or [])
        self.coins = list(coins or [])

    def roll_die(self) -> int:
        if self.dice:
            return self.dice.pop(0)
        return super().roll_die()

    def random(self) -> float:
        if self.coins:
            return self.coins.pop(0)
        return super().random()

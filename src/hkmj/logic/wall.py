"""
Wall state and operations for Hong Kong Mahjong.

The Wall holds the live wall for turn draws and the dead wall for kong and
bonus-tile replacements. It is rebuilt every round.

  live wall: first 130 tiles of the shuffled set, drawn from the front
  dead wall: last 14 tiles, replacement draws pop from the end
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from hkmj.logic.settings import NUM_PLAYERS
from hkmj.logic.tiles import TOTAL_TILES, Tile, create_all_tiles

if TYPE_CHECKING:
    from hkmj.logic.rng import TableRng

DEAD_WALL_SIZE = 14
TILES_PER_DEAL_BLOCK = 4
DEAL_BLOCKS = 3
TILES_PER_FINAL_DEAL = 1
DEALER_EXTRA_TILES = 1


class Wall(BaseModel):
    """Immutable wall state for a mahjong round."""

    model_config = ConfigDict(frozen=True)

    live_tiles: tuple[Tile, ...] = ()
    dead_wall_tiles: tuple[Tile, ...] = ()


def build_wall(rng: TableRng) -> Wall:
    """Shuffle all 144 tiles and set aside the last 14 as the dead wall."""
    return _split_wall(rng.shuffle(create_all_tiles()))


def create_wall_from_tiles(tiles: list[Tile]) -> Wall:
    """
    Create wall from explicit tile order (for tests/replays).

    Last 14 = dead wall, first 130 = live wall.
    """
    if len(tiles) != TOTAL_TILES:
        raise ValueError(f"Expected {TOTAL_TILES} tiles, got {len(tiles)}")
    if len({t.id for t in tiles}) != TOTAL_TILES:
        raise ValueError("All tile IDs must be unique (full permutation)")
    return _split_wall(tiles)


def _split_wall(tiles: list[Tile]) -> Wall:
    return Wall(
        live_tiles=tuple(tiles[:-DEAD_WALL_SIZE]),
        dead_wall_tiles=tuple(tiles[-DEAD_WALL_SIZE:]),
    )


def deal_initial_hands(wall: Wall, dealer_seat: int) -> tuple[Wall, list[list[Tile]]]:
    """
    Deal initial hands following the traditional dealing order.

    Starting from the dealer in seating order: 4 tiles x 3 rounds, then 1
    more each, then 1 extra for the dealer (dealer 14, others 13).
    Returns (updated_wall, hands) where hands is indexed by seat number (0-3).
    """
    min_tiles = (
        NUM_PLAYERS * (TILES_PER_DEAL_BLOCK * DEAL_BLOCKS + TILES_PER_FINAL_DEAL) + DEALER_EXTRA_TILES
    )
    if len(wall.live_tiles) < min_tiles:
        raise ValueError(f"Live wall has {len(wall.live_tiles)} tiles, need at least {min_tiles} for dealing")

    live = list(wall.live_tiles)
    hands: list[list[Tile]] = [[] for _ in range(NUM_PLAYERS)]
    pos = 0

    for _ in range(DEAL_BLOCKS):
        for offset in range(NUM_PLAYERS):
            seat = (dealer_seat + offset) % NUM_PLAYERS
            hands[seat].extend(live[pos : pos + TILES_PER_DEAL_BLOCK])
            pos += TILES_PER_DEAL_BLOCK

    for offset in range(NUM_PLAYERS):
        seat = (dealer_seat + offset) % NUM_PLAYERS
        hands[seat].append(live[pos])
        pos += TILES_PER_FINAL_DEAL

    hands[dealer_seat].append(live[pos])
    pos += DEALER_EXTRA_TILES

    new_wall = wall.model_copy(update={"live_tiles": tuple(live[pos:])})
    return new_wall, hands


def draw_tile(wall: Wall) -> tuple[Wall, Tile | None]:
    """Draw from front of live wall. Returns (new_wall, tile) or (wall, None) if empty."""
    if not wall.live_tiles:
        return wall, None
    tile = wall.live_tiles[0]
    new_wall = wall.model_copy(update={"live_tiles": wall.live_tiles[1:]})
    return new_wall, tile


def draw_from_dead_wall(wall: Wall) -> tuple[Wall, Tile | None]:
    """Pop a replacement tile from the end of the dead wall, or (wall, None) if it is empty."""
    if not wall.dead_wall_tiles:
        return wall, None
    tile = wall.dead_wall_tiles[-1]
    new_wall = wall.model_copy(update={"dead_wall_tiles": wall.dead_wall_tiles[:-1]})
    return new_wall, tile


def draw_replacement(wall: Wall) -> tuple[Wall, Tile | None]:
    """
    Draw a kong or bonus-tile replacement.

    Prefers the dead wall and falls back to the live wall once the dead wall
    is empty. Returns (wall, None) only when both are exhausted.
    """
    new_wall, tile = draw_from_dead_wall(wall)
    if tile is not None:
        return new_wall, tile
    return draw_tile(wall)


def is_wall_exhausted(wall: Wall) -> bool:
    """Check if live wall is empty."""
    return len(wall.live_tiles) == 0


def tiles_remaining(wall: Wall) -> int:
    """Count tiles remaining in live wall."""
    return len(wall.live_tiles)

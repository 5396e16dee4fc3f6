"""
Pydantic models for game logic data structures.

Contains the read-only table views handed to AI players and collaborators,
win information and the pending claim records used by the state machine.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from hkmj.logic.enums import ClaimAction, Expression, RoundResultType
from hkmj.logic.melds import Meld
from hkmj.logic.payment import PaymentResult
from hkmj.logic.scoring import ScoringResult
from hkmj.logic.tiles import Tile, TileKey


class PlayerView(BaseModel):
    """Public information about one seat."""

    model_config = ConfigDict(frozen=True)

    seat: int
    seat_wind: int
    score: int
    melds: tuple[Meld, ...] = ()
    bonus_tiles: tuple[Tile, ...] = ()
    discards: tuple[Tile, ...] = ()
    concealed_count: int = 0

    @property
    def discard_count(self) -> int:
        return len(self.discards)


class TableView(BaseModel):
    """
    Read-only snapshot of the table from one seat's perspective.

    Only the viewing seat's concealed tiles are included.
    """

    model_config = ConfigDict(frozen=True)

    seat: int
    seat_wind: int
    round_wind: int
    dealer: int
    minimum_fan: int
    wall_remaining: int
    concealed: tuple[Tile, ...] = ()
    all_discards: tuple[Tile, ...] = ()
    players: tuple[PlayerView, ...] = ()

    def discard_count_of(self, key: TileKey) -> int:
        """How many copies of key are visible in discard piles."""
        return sum(1 for t in self.all_discards if t.key == key)


class ClaimOption(BaseModel):
    """One claim the human seat may make on the current discard."""

    model_config = ConfigDict(frozen=True)

    action: ClaimAction
    chow_combos: tuple[tuple[TileKey, TileKey], ...] = ()


class AIClaim(BaseModel):
    """An AI claim that won arbitration and waits for process_ai_turn()."""

    model_config = ConfigDict(frozen=True)

    seat: int
    action: ClaimAction
    tile: Tile
    from_player: int


class WinInfo(BaseModel):
    """How the round was won."""

    model_config = ConfigDict(frozen=True)

    winner: int
    self_drawn: bool
    scoring: ScoringResult
    from_player: int | None = None
    winning_tile: Tile | None = None


class RoundResult(BaseModel):
    """Outcome of a finished round."""

    model_config = ConfigDict(frozen=True)

    type: RoundResultType
    win: WinInfo | None = None
    payment: PaymentResult
    scores: tuple[int, ...]


class SeatCharacter(BaseModel):
    """Per-seat stand-in for the presentation character; carries only an expression tag."""

    seat: int
    expression: Expression = Expression.NEUTRAL

"""Domain event models and the notification port.

The state machine publishes one event per observable change to an injected
EventSink. Collaborators (renderer, audio, UI) subscribe through the sink;
the engine never consumes anything they return.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Literal, Protocol, TypeVar

from pydantic import BaseModel, ConfigDict

from hkmj.logic.enums import Expression, GameEndReason, GameStateKind
from hkmj.logic.melds import Meld
from hkmj.logic.tiles import Tile
from hkmj.logic.types import ClaimOption, RoundResult

E = TypeVar("E", bound="GameEvent")


class EventType(StrEnum):
    """Types of game events."""

    STATE_CHANGED = "state_changed"
    DICE_ROLLED = "dice_rolled"
    ROUND_STARTED = "round_started"
    TILE_DRAWN = "tile_drawn"
    BONUS_TILE = "bonus_tile"
    DISCARD = "discard"
    MELD = "meld"
    CLAIM_PROMPT = "claim_prompt"
    AI_TURN_PENDING = "ai_turn_pending"
    ROUND_END = "round_end"
    SCORE_CHANGED = "score_changed"
    EXPRESSION_CHANGED = "expression_changed"
    GAME_ENDED = "game_ended"


class GameEvent(BaseModel):
    """Base class for all domain game events."""

    model_config = ConfigDict(frozen=True)

    type: EventType


class StateChangedEvent(GameEvent):
    """The table entered a new state."""

    type: Literal[EventType.STATE_CHANGED] = EventType.STATE_CHANGED
    state: GameStateKind


class DiceRolledEvent(GameEvent):
    type: Literal[EventType.DICE_ROLLED] = EventType.DICE_ROLLED
    dice: tuple[int, ...]


class RoundStartedEvent(GameEvent):
    """A round was dealt and bonus tiles resolved."""

    type: Literal[EventType.ROUND_STARTED] = EventType.ROUND_STARTED
    dealer: int
    round_wind: int
    seat_winds: tuple[int, ...]
    round_in_wind: int
    total_rounds: int


class TileDrawnEvent(GameEvent):
    type: Literal[EventType.TILE_DRAWN] = EventType.TILE_DRAWN
    seat: int
    tile: Tile
    is_replacement: bool = False


class BonusTileEvent(GameEvent):
    """A flower or season moved from the hand to the bonus pile."""

    type: Literal[EventType.BONUS_TILE] = EventType.BONUS_TILE
    seat: int
    tile: Tile


class DiscardEvent(GameEvent):
    type: Literal[EventType.DISCARD] = EventType.DISCARD
    seat: int
    tile: Tile


class MeldEvent(GameEvent):
    """A seat claimed a discard or declared a kong."""

    type: Literal[EventType.MELD] = EventType.MELD
    seat: int
    meld: Meld
    from_seat: int | None = None


class ClaimPromptEvent(GameEvent):
    """The human seat may claim the current discard."""

    type: Literal[EventType.CLAIM_PROMPT] = EventType.CLAIM_PROMPT
    seat: int
    tile: Tile
    from_seat: int
    options: tuple[ClaimOption, ...]


class AITurnPendingEvent(GameEvent):
    """
    An AI seat is ready to act.

    The collaborator calls process_ai_turn() when it wants the decision
    applied (typically after a short thinking delay).
    """

    type: Literal[EventType.AI_TURN_PENDING] = EventType.AI_TURN_PENDING
    seat: int


class RoundEndEvent(GameEvent):
    type: Literal[EventType.ROUND_END] = EventType.ROUND_END
    result: RoundResult


class ScoreChangedEvent(GameEvent):
    type: Literal[EventType.SCORE_CHANGED] = EventType.SCORE_CHANGED
    scores: tuple[int, ...]
    deltas: tuple[int, ...]


class ExpressionChangedEvent(GameEvent):
    type: Literal[EventType.EXPRESSION_CHANGED] = EventType.EXPRESSION_CHANGED
    seat: int
    expression: Expression


class GameEndedEvent(GameEvent):
    type: Literal[EventType.GAME_ENDED] = EventType.GAME_ENDED
    scores: tuple[int, ...]
    total_rounds: int
    reason: GameEndReason | None = None


# ---------------------------------------------------------------------------
# Notification port
# ---------------------------------------------------------------------------


class EventSink(Protocol):
    """Receiver of game events."""

    def publish(self, event: GameEvent) -> None: ...


class NullEventSink:
    """Discards every event."""

    def publish(self, event: GameEvent) -> None:
        pass


class RecordingEventSink:
    """Keeps every published event in order."""

    def __init__(self) -> None:
        self.events: list[GameEvent] = []

    def publish(self, event: GameEvent) -> None:
        self.events.append(event)

    def of_type(self, event_class: type[E]) -> list[E]:
        return [e for e in self.events if isinstance(e, event_class)]

    def states(self) -> list[GameStateKind]:
        """Sequence of states entered, from StateChangedEvents."""
        return [e.state for e in self.of_type(StateChangedEvent)]

    def clear(self) -> None:
        self.events.clear()

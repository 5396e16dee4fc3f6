"""
Game state for a single-player Hong Kong Mahjong match.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from hkmj.logic.enums import GameEndReason, GameStateKind, Wind
from hkmj.logic.settings import NUM_PLAYERS, GameSettings
from hkmj.logic.types import PlayerView, SeatCharacter, TableView
from hkmj.logic.wall import tiles_remaining

if TYPE_CHECKING:
    from hkmj.logic.hand import Hand
    from hkmj.logic.payment import PaymentResult
    from hkmj.logic.tiles import Tile
    from hkmj.logic.types import AIClaim, ClaimOption, RoundResult, WinInfo
    from hkmj.logic.wall import Wall


def seat_to_wind(seat: int, dealer: int) -> int:
    """Seat wind relative to the dealer: dealer is East (1), then South, West, North."""
    return ((seat - dealer + NUM_PLAYERS) % NUM_PLAYERS) + 1


def dealer_from_dice(dice_sum: int) -> int:
    """
    Initial dealer from the dice total: (sum - 1) % 4.

    Seats are 0 = self, 1 = next (right), 2 = opposite, 3 = previous (left).
    """
    return (dice_sum - 1) % NUM_PLAYERS


@dataclass
class GameState:
    """
    Per-match state, mutated only by the state machine.

    round_in_wind counts dealers within the current prevailing wind (0-3);
    total_rounds counts completed rounds of the match.
    """

    settings: GameSettings = field(default_factory=GameSettings)
    state: GameStateKind = GameStateKind.MENU
    dealer: int = 0
    round_wind: int = Wind.EAST
    round_in_wind: int = 0
    total_rounds: int = 0
    seat_winds: list[int] = field(default_factory=lambda: [int(w) for w in Wind])
    scores: list[int] = field(default_factory=list)
    dice: tuple[int, ...] = (0, 0, 0)
    dice_rolled: bool = False

    current_player: int = 0
    turn_count: int = 0
    last_discard: Tile | None = None
    last_discard_player: int | None = None
    pending_claims: list[ClaimOption] = field(default_factory=list)
    pending_ai_claim: AIClaim | None = None
    self_drawn: bool = False
    is_kong_draw: bool = False

    win_info: WinInfo | None = None
    payment: PaymentResult | None = None
    round_result: RoundResult | None = None
    end_reason: GameEndReason | None = None
    characters: list[SeatCharacter] = field(
        default_factory=lambda: [SeatCharacter(seat=seat) for seat in range(NUM_PLAYERS)]
    )

    def __post_init__(self) -> None:
        if not self.scores:
            self.scores = [self.settings.starting_score] * NUM_PLAYERS

    @property
    def winner(self) -> int | None:
        return self.win_info.winner if self.win_info is not None else None

    def reset_round(self) -> None:
        """Clear per-round turn and result fields."""
        self.current_player = self.dealer
        self.turn_count = 0
        self.last_discard = None
        self.last_discard_player = None
        self.pending_claims = []
        self.pending_ai_claim = None
        self.self_drawn = False
        self.is_kong_draw = False
        self.win_info = None
        self.payment = None
        self.round_result = None


def get_table_view(game_state: GameState, hands: list[Hand], wall: Wall, seat: int) -> TableView:
    """
    Build the read-only view of the table for one seat.

    Only that seat's concealed tiles are included; other seats expose melds,
    bonus tiles, discards and their concealed tile count.
    """
    players = tuple(
        PlayerView(
            seat=hand.seat,
            seat_wind=game_state.seat_winds[hand.seat],
            score=game_state.scores[hand.seat],
            melds=tuple(hand.melds),
            bonus_tiles=tuple(hand.bonus_tiles),
            discards=tuple(hand.discards),
            concealed_count=len(hand.concealed),
        )
        for hand in hands
    )
    all_discards = tuple(tile for hand in hands for tile in hand.discards)
    own = hands[seat] if 0 <= seat < len(hands) else None
    return TableView(
        seat=seat,
        seat_wind=game_state.seat_winds[seat],
        round_wind=game_state.round_wind,
        dealer=game_state.dealer,
        minimum_fan=game_state.settings.minimum_fan,
        wall_remaining=tiles_remaining(wall),
        concealed=tuple(own.concealed) if own is not None else (),
        all_discards=all_discards,
        players=players,
    )

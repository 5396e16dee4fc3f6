"""
Table state machine for a single-player Hong Kong Mahjong match.

Seat 0 is the human player; seats 1-3 are AI. Every public action checks the
current state first and returns False (logging a warning) when it does not
apply, so a collaborator offering only legal actions never sees a rejection.

AI pacing belongs to the collaborator: whenever an AI seat is due to act the
table enters AI_TURN and publishes AITurnPendingEvent, and nothing happens
until process_ai_turn() is called.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from hkmj.logic.ai_player import AIPlayer
from hkmj.logic.claims import arbitrate_ai_claims, human_claim_options
from hkmj.logic.enums import ClaimAction, Expression, GameStateKind, KongType, RoundResultType, Wind
from hkmj.logic.events import (
    AITurnPendingEvent,
    BonusTileEvent,
    ClaimPromptEvent,
    DiceRolledEvent,
    DiscardEvent,
    ExpressionChangedEvent,
    GameEndedEvent,
    MeldEvent,
    NullEventSink,
    RoundEndEvent,
    RoundStartedEvent,
    ScoreChangedEvent,
    StateChangedEvent,
    TileDrawnEvent,
)
from hkmj.logic.hand import Hand
from hkmj.logic.payment import calculate_payment, drawn_round_payment
from hkmj.logic.rng import TableRng
from hkmj.logic.round_advance import compute_round_advance
from hkmj.logic.scoring import ScoringContext, ScoringResult, calculate, meets_minimum
from hkmj.logic.settings import HUMAN_SEAT, NUM_PLAYERS, GameSettings, validate_settings
from hkmj.logic.state import GameState, dealer_from_dice, get_table_view, seat_to_wind
from hkmj.logic.types import AIClaim, RoundResult, WinInfo
from hkmj.logic.wall import (
    Wall,
    build_wall,
    deal_initial_hands,
    draw_replacement,
    draw_tile,
    tiles_remaining,
)

if TYPE_CHECKING:
    from hkmj.logic.events import EventSink, GameEvent
    from hkmj.logic.melds import Meld
    from hkmj.logic.payment import PaymentResult
    from hkmj.logic.tiles import Tile, TileKey
    from hkmj.logic.types import TableView

logger = structlog.get_logger()

DICE_COUNT = 3
LOW_WALL_WARNING = 15
AFTER_DISCARD_MOD = 1
BEFORE_DISCARD_MOD = 2
AI_SEATS = tuple(seat for seat in range(NUM_PLAYERS) if seat != HUMAN_SEAT)


class MahjongGame:
    """
    One match at a four-seat table.

    The rng drives the dice, every wall shuffle and all AI coin flips; the
    sink receives every notification.
    """

    def __init__(
        self,
        settings: GameSettings | None = None,
        *,
        rng: TableRng | None = None,
        sink: EventSink | None = None,
    ) -> None:
        self.settings = settings if settings is not None else GameSettings()
        validate_settings(self.settings)
        self.rng = rng if rng is not None else TableRng()
        self.sink: EventSink = sink if sink is not None else NullEventSink()
        self.game_state = GameState(settings=self.settings)
        self.wall = Wall()
        self.hands = [Hand(seat=seat) for seat in range(NUM_PLAYERS)]
        self.ai_players = {seat: AIPlayer(self.settings.difficulty, self.rng) for seat in AI_SEATS}

    # ------------------------------------------------------------------
    # queries
    # ------------------------------------------------------------------

    @property
    def state(self) -> GameStateKind:
        return self.game_state.state

    def table_view(self, seat: int = HUMAN_SEAT) -> TableView:
        return get_table_view(self.game_state, self.hands, self.wall, seat)

    def tile_accounting(self) -> int:
        """Tiles across hands, melds, bonus piles, discard piles and both walls (always 144)."""
        in_hands = sum(hand.tile_count() + len(hand.discards) for hand in self.hands)
        return in_hands + len(self.wall.live_tiles) + len(self.wall.dead_wall_tiles)

    # ------------------------------------------------------------------
    # internal helpers
    # ------------------------------------------------------------------

    def _publish(self, event: GameEvent) -> None:
        self.sink.publish(event)

    def _set_state(self, state: GameStateKind) -> None:
        self.game_state.state = state
        self._publish(StateChangedEvent(state=state))
        if state == GameStateKind.AI_TURN:
            self._publish(AITurnPendingEvent(seat=self.game_state.current_player))

    def _set_expression(self, seat: int, expression: Expression) -> None:
        self.game_state.characters[seat].expression = expression
        self._publish(ExpressionChangedEvent(seat=seat, expression=expression))

    def _reject(self, action: str, reason: str) -> bool:
        logger.warning("action rejected", action=action, reason=reason, state=self.state)
        return False

    def _context(self, seat: int, *, self_drawn: bool, is_kong_draw: bool = False) -> ScoringContext:
        return ScoringContext(
            seat_wind=self.game_state.seat_winds[seat],
            round_wind=self.game_state.round_wind,
            self_drawn=self_drawn,
            is_last_tile=tiles_remaining(self.wall) <= 0,
            is_kong_draw=is_kong_draw,
            minimum_fan=self.settings.minimum_fan,
        )

    def _self_win_scoring(self, seat: int) -> ScoringResult | None:
        """Scoring for a self-drawn win by seat, or None if the hand cannot win now."""
        hand = self.hands[seat]
        if not hand.can_win():
            return None
        context = self._context(seat, self_drawn=True, is_kong_draw=self.game_state.is_kong_draw)
        result = calculate(hand, context)
        if not meets_minimum(result.total_fan, self.settings.minimum_fan):
            return None
        return result

    def _draw_live(self, seat: int) -> Tile | None:
        self.wall, tile = draw_tile(self.wall)
        if tile is not None:
            self.hands[seat].add_tile(tile)
            self._publish(TileDrawnEvent(seat=seat, tile=tile))
        return tile

    def _draw_replacement(self, seat: int) -> Tile | None:
        """
        Replacement draw after a kong: dead wall first, live wall fallback.

        Returns None when the walls ran out, including during the bonus bloom.
        """
        self.wall, tile = draw_replacement(self.wall)
        if tile is None:
            return None
        self.hands[seat].add_tile(tile)
        self._publish(TileDrawnEvent(seat=seat, tile=tile, is_replacement=True))
        if not self._bloom(seat):
            return None
        return tile

    def _bloom(self, seat: int) -> bool:
        """
        Move bonus tiles to the bonus pile and draw replacements until none remain.

        Bonus tiles always leave the concealed hand. Returns False when both
        walls ran out before every replacement was drawn.
        """
        hand = self.hands[seat]
        while True:
            bonus = [t for t in hand.concealed if t.is_bonus]
            if not bonus:
                return True
            for tile in bonus:
                hand.remove_tile(tile)
                hand.add_bonus(tile)
                self._publish(BonusTileEvent(seat=seat, tile=tile))
            for _ in bonus:
                self.wall, replacement = draw_replacement(self.wall)
                if replacement is None:
                    logger.info("walls exhausted during bonus replacement", seat=seat, bonus=len(hand.bonus_tiles))
                    return False
                hand.add_tile(replacement)
                self._publish(TileDrawnEvent(seat=seat, tile=replacement, is_replacement=True))

    def _validate_hand_size(self, seat: int, *, before_discard: bool) -> None:
        """
        Repair a concealed hand that drifted from 3k+2 (about to discard) or 3k+1.

        Draws from the live wall when short and pushes excess tiles to the
        discard pile when long.
        """
        hand = self.hands[seat]
        expected_mod = BEFORE_DISCARD_MOD if before_discard else AFTER_DISCARD_MOD
        actual = len(hand.concealed)
        if actual % 3 == expected_mod:
            return

        target = actual
        while target % 3 != expected_mod and target > 0:
            target -= 1
        if target <= 0:
            target = expected_mod
        logger.warning("hand size repaired", seat=seat, actual=actual, target=target)

        while len(hand.concealed) < target:
            if self._draw_live(seat) is None or not self._bloom(seat):
                break
        while len(hand.concealed) > target:
            hand.discards.append(hand.concealed.pop())

    # ------------------------------------------------------------------
    # match lifecycle
    # ------------------------------------------------------------------

    def start_game(self) -> bool:
        """Reset winds, counters and scores and wait for the dice."""
        self.game_state = GameState(settings=self.settings)
        self.wall = Wall()
        self.hands = [Hand(seat=seat) for seat in range(NUM_PLAYERS)]
        logger.info("game started", difficulty=self.settings.difficulty, minimum_fan=self.settings.minimum_fan)
        self._set_state(GameStateKind.DICE_ROLL)
        return True

    def roll_dice(self) -> bool:
        """Roll three dice; only once per match."""
        if self.state != GameStateKind.DICE_ROLL:
            return self._reject("roll_dice", "not rolling dice")
        if self.game_state.dice_rolled:
            return self._reject("roll_dice", "dice already rolled")
        self.game_state.dice = tuple(self.rng.roll_die() for _ in range(DICE_COUNT))
        self.game_state.dice_rolled = True
        self._publish(DiceRolledEvent(dice=self.game_state.dice))
        return True

    def confirm_dice(self) -> bool:
        """Fix the first dealer from the dice total and deal the first round."""
        if self.state != GameStateKind.DICE_ROLL or not self.game_state.dice_rolled:
            return self._reject("confirm_dice", "dice not rolled")
        self.game_state.dealer = dealer_from_dice(sum(self.game_state.dice))
        logger.info("dealer chosen", dice=list(self.game_state.dice), dealer=self.game_state.dealer)
        self._start_round()
        return True

    def _start_round(self) -> None:
        gs = self.game_state
        self.wall = build_wall(self.rng)
        self.hands = [Hand(seat=seat) for seat in range(NUM_PLAYERS)]
        gs.seat_winds = [seat_to_wind(seat, gs.dealer) for seat in range(NUM_PLAYERS)]

        self.wall, dealt = deal_initial_hands(self.wall, gs.dealer)
        for seat, tiles in enumerate(dealt):
            self.hands[seat].set_initial(tiles)

        for offset in range(NUM_PLAYERS):
            self._bloom((gs.dealer + offset) % NUM_PLAYERS)
        for seat in range(NUM_PLAYERS):
            self._validate_hand_size(seat, before_discard=seat == gs.dealer)

        gs.reset_round()
        # the dealer's 14th tile counts as drawn
        gs.self_drawn = True

        for seat in range(NUM_PLAYERS):
            self._set_expression(seat, Expression.NEUTRAL)
        self._set_expression(gs.dealer, Expression.THINKING)

        logger.info(
            "round started",
            dealer=gs.dealer,
            round_wind=Wind(gs.round_wind).name,
            round_in_wind=gs.round_in_wind,
            total_rounds=gs.total_rounds,
        )
        self._publish(
            RoundStartedEvent(
                dealer=gs.dealer,
                round_wind=gs.round_wind,
                seat_winds=tuple(gs.seat_winds),
                round_in_wind=gs.round_in_wind,
                total_rounds=gs.total_rounds,
            )
        )
        self._set_state(GameStateKind.PLAYER_DISCARD if gs.dealer == HUMAN_SEAT else GameStateKind.AI_TURN)

    def next_round(self) -> bool:
        """Advance dealer and wind, or end the match."""
        if self.state != GameStateKind.ROUND_END:
            return self._reject("next_round", "round not finished")
        gs = self.game_state
        advance = compute_round_advance(
            scores=gs.scores,
            total_rounds=gs.total_rounds,
            max_rounds=self.settings.max_rounds,
            dealer=gs.dealer,
            round_wind=gs.round_wind,
            round_in_wind=gs.round_in_wind,
            winner=gs.winner,
        )
        if advance.game_over:
            gs.end_reason = advance.reason
            logger.info("game ended", reason=advance.reason, scores=list(gs.scores), total_rounds=gs.total_rounds)
            self._set_state(GameStateKind.GAME_END)
            self._publish(
                GameEndedEvent(scores=tuple(gs.scores), total_rounds=gs.total_rounds, reason=advance.reason)
            )
            return True

        gs.dealer = advance.dealer
        gs.round_wind = advance.round_wind
        gs.round_in_wind = advance.round_in_wind
        self._start_round()
        return True

    # ------------------------------------------------------------------
    # round end
    # ------------------------------------------------------------------

    def _declare_win(
        self,
        seat: int,
        scoring: ScoringResult,
        *,
        self_drawn: bool,
        from_player: int | None = None,
        tile: Tile | None = None,
    ) -> None:
        gs = self.game_state
        gs.win_info = WinInfo(
            winner=seat,
            self_drawn=self_drawn,
            scoring=scoring,
            from_player=from_player,
            winning_tile=tile,
        )
        self._set_expression(seat, Expression.ECSTATIC)
        for other in range(NUM_PLAYERS):
            if other == seat:
                continue
            if self_drawn or other == from_player:
                self._set_expression(other, Expression.ANGRY)
            else:
                self._set_expression(other, Expression.SURPRISED)

        payment = calculate_payment(
            winner=seat,
            dealer=gs.dealer,
            total_fan=scoring.total_fan,
            self_drawn=self_drawn,
            from_player=from_player,
            winner_melds=self.hands[seat].melds,
        )
        logger.info(
            "round won",
            winner=seat,
            self_drawn=self_drawn,
            from_player=from_player,
            total_fan=scoring.total_fan,
            rules=[entry.rule for entry in scoring.breakdown],
            responsible=payment.responsible,
        )
        result_type = RoundResultType.SELF_DRAWN_WIN if self_drawn else RoundResultType.DISCARD_WIN
        self._finish_round(result_type, payment)

    def _handle_drawn_round(self) -> None:
        self.game_state.win_info = None
        for seat in range(NUM_PLAYERS):
            self._set_expression(seat, Expression.WORRIED)
        logger.info("round drawn", dealer=self.game_state.dealer, total_rounds=self.game_state.total_rounds)
        self._finish_round(RoundResultType.DRAWN_ROUND, drawn_round_payment())

    def _finish_round(self, result_type: RoundResultType, payment: PaymentResult) -> None:
        gs = self.game_state
        gs.payment = payment
        gs.scores = [score + delta for score, delta in zip(gs.scores, payment.deltas, strict=True)]
        gs.total_rounds += 1
        gs.pending_claims = []
        gs.pending_ai_claim = None
        gs.round_result = RoundResult(
            type=result_type,
            win=gs.win_info,
            payment=payment,
            scores=tuple(gs.scores),
        )
        logger.info("payment applied", deltas=list(payment.deltas), scores=list(gs.scores))
        self._publish(ScoreChangedEvent(scores=tuple(gs.scores), deltas=payment.deltas))
        self._publish(RoundEndEvent(result=gs.round_result))
        self._set_state(GameStateKind.ROUND_END)

    # ------------------------------------------------------------------
    # human seat
    # ------------------------------------------------------------------

    def player_draw(self) -> bool:
        """Draw the turn tile; an exhausted wall ends the round as a draw."""
        if self.state != GameStateKind.PLAYER_TURN:
            return self._reject("player_draw", "not the player's draw")
        gs = self.game_state
        if self._draw_live(HUMAN_SEAT) is None or not self._bloom(HUMAN_SEAT):
            self._handle_drawn_round()
            return True
        gs.self_drawn = True
        gs.is_kong_draw = False
        self._validate_hand_size(HUMAN_SEAT, before_discard=True)

        self._set_expression(HUMAN_SEAT, Expression.THINKING)
        if tiles_remaining(self.wall) < LOW_WALL_WARNING:
            self._set_expression(HUMAN_SEAT, Expression.WORRIED)
        self._set_state(GameStateKind.PLAYER_DISCARD)
        return True

    def can_player_self_win(self) -> bool:
        """The human holds a complete self-drawn hand worth at least the minimum fan."""
        if self.state != GameStateKind.PLAYER_DISCARD or not self.game_state.self_drawn:
            return False
        return self._self_win_scoring(HUMAN_SEAT) is not None

    def player_self_win(self) -> bool:
        if self.state != GameStateKind.PLAYER_DISCARD or not self.game_state.self_drawn:
            return self._reject("player_self_win", "no drawn tile to win on")
        scoring = self._self_win_scoring(HUMAN_SEAT)
        if scoring is None:
            return self._reject("player_self_win", "hand is not a qualifying win")
        self._declare_win(HUMAN_SEAT, scoring, self_drawn=True)
        return True

    def player_kong_options(self) -> list[tuple[KongType, TileKey]]:
        """Kongs the human may declare now: concealed kongs first, then added kongs."""
        if self.state != GameStateKind.PLAYER_DISCARD:
            return []
        hand = self.hands[HUMAN_SEAT]
        options = [(KongType.CONCEALED, key) for key in hand.concealed_kong_keys()]
        options.extend((KongType.ADDED, key) for key in hand.added_kong_keys())
        return options

    def player_kong(self, kind: KongType, key: TileKey) -> bool:
        if (kind, key) not in self.player_kong_options():
            return self._reject("player_kong", "kong not available")
        if not self._declare_own_kong(HUMAN_SEAT, kind, key):
            return True
        self._validate_hand_size(HUMAN_SEAT, before_discard=True)
        self._set_state(GameStateKind.PLAYER_DISCARD)
        return True

    def player_discard(self, tile: Tile) -> bool:
        if self.state != GameStateKind.PLAYER_DISCARD:
            return self._reject("player_discard", "not the player's discard")
        if not any(held.id == tile.id for held in self.hands[HUMAN_SEAT].concealed):
            return self._reject("player_discard", "tile not in hand")
        self._discard(HUMAN_SEAT, tile)
        return True

    def player_claim(self, action: ClaimAction, combo: tuple[TileKey, TileKey] | None = None) -> bool:
        """Claim the current discard with one of the offered actions."""
        if self.state != GameStateKind.CLAIMING:
            return self._reject("player_claim", "no claim pending")
        gs = self.game_state
        option = next((o for o in gs.pending_claims if o.action == action), None)
        if option is None:
            return self._reject("player_claim", f"{action.value} not offered")
        if action == ClaimAction.CHOW:
            if combo is None:
                combo = option.chow_combos[0]
            elif combo not in option.chow_combos:
                return self._reject("player_claim", "chow combination not offered")

        tile, discarder = gs.last_discard, gs.last_discard_player
        if tile is None or discarder is None:
            return self._reject("player_claim", "no discard to claim")
        gs.pending_claims = []
        gs.current_player = HUMAN_SEAT
        self._execute_claim(HUMAN_SEAT, action, tile, discarder, combo)
        if self.state == GameStateKind.CLAIMING:
            self._validate_hand_size(HUMAN_SEAT, before_discard=True)
            self._set_state(GameStateKind.PLAYER_DISCARD)
        return True

    def player_pass(self) -> bool:
        """Decline the discard; AI seats may still claim it."""
        if self.state != GameStateKind.CLAIMING:
            return self._reject("player_pass", "no claim pending")
        gs = self.game_state
        gs.pending_claims = []
        if gs.last_discard is None or gs.last_discard_player is None:
            self._advance_turn()
            return True
        # the human only had first refusal; AI seats still get a chance at this discard
        self._resolve_ai_claims(gs.last_discard, gs.last_discard_player)
        return True

    # ------------------------------------------------------------------
    # AI seats
    # ------------------------------------------------------------------

    def process_ai_turn(self) -> bool:
        """
        Apply the pending AI decision.

        Either executes an AI claim that won arbitration, or plays a normal
        turn: draw (unless already holding a full hand), self-drawn win,
        kong with replacement draw and win check, then discard.
        """
        if self.state != GameStateKind.AI_TURN:
            return self._reject("process_ai_turn", "not an AI turn")
        gs = self.game_state
        seat = gs.current_player

        claim = gs.pending_ai_claim
        if claim is not None:
            gs.pending_ai_claim = None
            ai = self.ai_players[claim.seat]
            combo = None
            if claim.action == ClaimAction.CHOW:
                combo = ai.choose_chow_combo(self.hands[claim.seat].chow_options(claim.tile))
            self._execute_claim(claim.seat, claim.action, claim.tile, claim.from_player, combo)
            if self.state == GameStateKind.AI_TURN:
                self._validate_hand_size(claim.seat, before_discard=True)
                self._ai_discard(claim.seat)
            return True

        hand = self.hands[seat]
        if len(hand.concealed) % 3 != BEFORE_DISCARD_MOD:
            if self._draw_live(seat) is None or not self._bloom(seat):
                self._handle_drawn_round()
                return True
            gs.self_drawn = True
            gs.is_kong_draw = False
        self._validate_hand_size(seat, before_discard=True)

        if gs.self_drawn:
            scoring = self._self_win_scoring(seat)
            if scoring is not None:
                self._declare_win(seat, scoring, self_drawn=True)
                return True

        kong = self.ai_players[seat].decide_kong(hand)
        if kong is not None:
            kind, key = kong
            if not self._declare_own_kong(seat, kind, key):
                return True
            scoring = self._self_win_scoring(seat)
            if scoring is not None:
                self._declare_win(seat, scoring, self_drawn=True)
                return True
            self._validate_hand_size(seat, before_discard=True)

        self._ai_discard(seat)
        return True

    def _ai_discard(self, seat: int) -> None:
        tile = self.ai_players[seat].choose_discard(self.hands[seat], self.table_view(seat))
        self._set_expression(seat, Expression.SMIRK)
        self._discard(seat, tile)

    # ------------------------------------------------------------------
    # shared turn mechanics
    # ------------------------------------------------------------------

    def _declare_own_kong(self, seat: int, kind: KongType, key: TileKey) -> bool:
        """
        Declare a concealed or added kong and draw its replacement.

        Returns False when no replacement tile exists and the round ended drawn.
        """
        hand = self.hands[seat]
        meld = hand.do_kong_concealed(key) if kind == KongType.CONCEALED else hand.do_kong_added(key)
        self._publish(MeldEvent(seat=seat, meld=meld, from_seat=meld.source_player))
        return self._after_kong(seat)

    def _after_kong(self, seat: int) -> bool:
        gs = self.game_state
        if self._draw_replacement(seat) is None:
            self._handle_drawn_round()
            return False
        gs.self_drawn = True
        gs.is_kong_draw = True
        return True

    def _execute_claim(
        self,
        seat: int,
        action: ClaimAction,
        tile: Tile,
        discarder: int,
        combo: tuple[TileKey, TileKey] | None,
    ) -> None:
        """
        Move the claimed discard into seat's hand.

        Leaves the state untouched unless the claim ends the round, so the
        caller decides whether a discard follows.
        """
        gs = self.game_state
        hand = self.hands[seat]
        self.hands[discarder].remove_last_discard(tile)
        gs.current_player = seat

        if action == ClaimAction.WIN:
            hand.add_tile(tile)
            scoring = calculate(hand, self._context(seat, self_drawn=False))
            self._declare_win(seat, scoring, self_drawn=False, from_player=discarder, tile=tile)
            return

        meld: Meld
        if action == ClaimAction.KONG:
            meld = hand.do_kong_exposed(tile, discarder)
        elif action == ClaimAction.PUNG:
            meld = hand.do_pung(tile, discarder)
        else:
            if combo is None:
                raise ValueError("chow claim requires a combination")
            meld = hand.do_chow(tile, combo, discarder)
        self._publish(MeldEvent(seat=seat, meld=meld, from_seat=discarder))
        self._set_expression(seat, Expression.HAPPY)
        self._set_expression(discarder, Expression.SURPRISED)
        logger.debug("discard claimed", seat=seat, action=action, from_seat=discarder, tile=str(tile))

        gs.self_drawn = False
        gs.is_kong_draw = False
        if action != ClaimAction.KONG or not self._after_kong(seat):
            return
        if seat != HUMAN_SEAT:
            scoring = self._self_win_scoring(seat)
            if scoring is not None:
                self._declare_win(seat, scoring, self_drawn=True)

    def _discard(self, seat: int, tile: Tile) -> None:
        gs = self.game_state
        self.hands[seat].discard(tile)
        gs.last_discard = tile
        gs.last_discard_player = seat
        gs.self_drawn = False
        gs.is_kong_draw = False
        self._publish(DiscardEvent(seat=seat, tile=tile))
        self._process_claims(tile, seat)

    def _process_claims(self, tile: Tile, discarder: int) -> None:
        """Offer the discard to the human first, then to the AI seats."""
        gs = self.game_state
        if discarder != HUMAN_SEAT:
            options = human_claim_options(
                self.hands[HUMAN_SEAT], tile, discarder=discarder, view=self.table_view(HUMAN_SEAT)
            )
            if options:
                gs.pending_claims = options
                self._publish(
                    ClaimPromptEvent(seat=HUMAN_SEAT, tile=tile, from_seat=discarder, options=tuple(options))
                )
                self._set_state(GameStateKind.CLAIMING)
                return
        self._resolve_ai_claims(tile, discarder)

    def _resolve_ai_claims(self, tile: Tile, discarder: int) -> None:
        def decide(seat: int, can_chow: bool) -> ClaimAction | None:
            return self.ai_players[seat].decide_claim(
                self.hands[seat], tile, can_chow=can_chow, view=self.table_view(seat)
            )

        best = arbitrate_ai_claims(discarder, decide)
        if best is None:
            self._advance_turn()
            return
        gs = self.game_state
        gs.pending_ai_claim = AIClaim(seat=best.seat, action=best.action, tile=tile, from_player=discarder)
        gs.current_player = best.seat
        self._set_state(GameStateKind.AI_TURN)

    def _advance_turn(self) -> None:
        gs = self.game_state
        discarder = gs.last_discard_player if gs.last_discard_player is not None else gs.current_player
        gs.current_player = (discarder + 1) % NUM_PLAYERS
        gs.turn_count += 1
        self._set_state(GameStateKind.PLAYER_TURN if gs.current_player == HUMAN_SEAT else GameStateKind.AI_TURN)


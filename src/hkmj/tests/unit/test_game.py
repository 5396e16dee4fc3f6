"""
Unit tests for the table state machine.

Covers dice and dealer selection, dealing, human draws, discards, claims and
kongs, AI turns, round end, payments and match end. Scenario tests replace
the dealt hands with scripted ones after the first deal.
"""

import logging

import pytest

from hkmj.logic.enums import (
    ClaimAction,
    Difficulty,
    Expression,
    FanRule,
    GameEndReason,
    GameStateKind,
    KongType,
    MeldKind,
    RoundResultType,
    Wind,
)
from hkmj.logic.events import (
    AITurnPendingEvent,
    BonusTileEvent,
    ClaimPromptEvent,
    DiceRolledEvent,
    GameEndedEvent,
    MeldEvent,
    RecordingEventSink,
    RoundEndEvent,
    RoundStartedEvent,
    ScoreChangedEvent,
)
from hkmj.logic.exceptions import UnsupportedSettingsError
from hkmj.logic.game import MahjongGame
from hkmj.logic.hand import Hand
from hkmj.logic.melds import Meld
from hkmj.logic.settings import GameSettings
from hkmj.logic.state import dealer_from_dice, seat_to_wind
from hkmj.logic.tiles import TOTAL_TILES, Tile, create_all_tiles
from hkmj.logic.wall import Wall, tiles_remaining
from hkmj.tests.unit.helpers import ScriptedRng, key, make_hand, tile, tiles

# 3 + 4 + 2 = 9 makes seat 0 the first dealer
DEALER_ZERO_DICE = [3, 4, 2]

# thirteen tiles that cannot claim or win on any suited tile
NO_CLAIM_HAND = "19c 159o 19b 1234w 11d"


def _make_game(*, settings: GameSettings | None = None, dice=None, coins=None):
    sink = RecordingEventSink()
    rng = ScriptedRng(dice=dice if dice is not None else list(DEALER_ZERO_DICE), coins=coins)
    game = MahjongGame(settings, rng=rng, sink=sink)
    return game, sink


def _ready_game(**kwargs):
    """Game dealt with seat 0 as dealer, waiting for the human discard."""
    game, sink = _make_game(**kwargs)
    game.start_game()
    game.roll_dice()
    game.confirm_dice()
    return game, sink


def _quiet_ai_hands(game: MahjongGame) -> None:
    for seat in (1, 2, 3):
        game.hands[seat] = make_hand(NO_CLAIM_HAND, seat=seat)


def _expressions(game: MahjongGame) -> list[Expression]:
    return [c.expression for c in game.game_state.characters]


# 13 singletons with no pair and no chow shape; three copies fit in one tile set
QUIET_HAND = "19c 159o 19b 1234w 12d"


def _take(pool: list[Tile], notation: str) -> list[Tile]:
    """Remove real tiles matching notation from pool, in notation order."""
    taken = []
    for wanted in tiles(notation):
        found = next(t for t in pool if t.key == wanted.key)
        pool.remove(found)
        taken.append(found)
    return taken


def _stack_table(
    game: MahjongGame,
    concealed: dict[int, str],
    *,
    live: str = "",
    dead: str = "",
    pungs: dict[int, str] | None = None,
    spare_to_discards: bool = False,
) -> None:
    """
    Replace every hand and both walls with tiles from one real 144-tile set.

    live is drawn first from the front; the last tile of dead is the first
    replacement. Leftover tiles go behind live, or onto seat 2's discard pile
    when both walls should hold only the stacked tiles.
    """
    pool = create_all_tiles()
    for seat in range(4):
        hand = Hand(seat=seat)
        hand.set_initial(_take(pool, concealed.get(seat, QUIET_HAND)))
        game.hands[seat] = hand
    for seat, notation in (pungs or {}).items():
        source = (seat + 1) % 4
        game.hands[seat].melds = [Meld(kind=MeldKind.PUNG, tiles=tuple(_take(pool, notation)), source_player=source)]
    front = _take(pool, live)
    tail = _take(pool, dead)
    if spare_to_discards:
        game.hands[2].discards = pool
        pool = []
    game.wall = Wall(live_tiles=tuple(front + pool), dead_wall_tiles=tuple(tail))
    assert game.tile_accounting() == TOTAL_TILES


def _check_hand_sizes(game: MahjongGame) -> None:
    assert game.tile_accounting() == TOTAL_TILES
    for hand in game.hands:
        assert len(hand.concealed) % 3 in (1, 2)
        assert not any(t.is_bonus for t in hand.concealed)


class TestDealerSelection:
    @pytest.mark.parametrize(("total", "dealer"), [(3, 2), (7, 2), (9, 0), (18, 1)])
    def test_dealer_from_dice(self, total, dealer):
        assert dealer_from_dice(total) == dealer

    def test_seat_winds_relative_to_dealer(self):
        assert [seat_to_wind(seat, 2) for seat in range(4)] == [Wind.WEST, Wind.NORTH, Wind.EAST, Wind.SOUTH]


class TestMatchSetup:
    def test_start_game_waits_for_dice(self):
        game, sink = _make_game()
        assert game.state == GameStateKind.MENU
        assert game.start_game()
        assert game.state == GameStateKind.DICE_ROLL
        assert game.game_state.scores == [10000] * 4

    def test_dice_roll_once_per_match(self):
        game, sink = _make_game()
        game.start_game()
        assert game.roll_dice()
        assert sink.of_type(DiceRolledEvent)[0].dice == (3, 4, 2)
        assert not game.roll_dice()

    def test_confirm_requires_roll(self):
        game, _ = _make_game()
        game.start_game()
        assert not game.confirm_dice()

    def test_first_deal(self):
        game, sink = _ready_game()
        assert game.game_state.dealer == 0
        assert game.state == GameStateKind.PLAYER_DISCARD
        assert game.game_state.seat_winds == [Wind.EAST, Wind.SOUTH, Wind.WEST, Wind.NORTH]
        assert [len(h.concealed) for h in game.hands] == [14, 13, 13, 13]
        assert not any(t.is_bonus for h in game.hands for t in h.concealed)
        assert game.tile_accounting() == TOTAL_TILES
        assert game.game_state.self_drawn
        assert sink.states() == [GameStateKind.DICE_ROLL, GameStateKind.PLAYER_DISCARD]
        started = sink.of_type(RoundStartedEvent)[0]
        assert started.dealer == 0
        assert started.round_wind == Wind.EAST

    def test_ai_dealer_starts_in_ai_turn(self):
        # 1 + 1 + 1 = 3 makes seat 2 the dealer
        game, sink = _ready_game(dice=[1, 1, 1])
        assert game.game_state.dealer == 2
        assert game.state == GameStateKind.AI_TURN
        assert game.game_state.current_player == 2
        assert sink.of_type(AITurnPendingEvent)[-1].seat == 2
        assert len(game.hands[2].concealed) == 14

    def test_dealer_thinking_others_neutral(self):
        game, _ = _ready_game()
        assert _expressions(game) == [Expression.THINKING] + [Expression.NEUTRAL] * 3

    def test_invalid_settings_rejected_at_construction(self):
        with pytest.raises(UnsupportedSettingsError, match="minimum_fan"):
            MahjongGame(GameSettings(minimum_fan=20))


class TestRejectedActions:
    def test_actions_in_wrong_state_return_false(self, caplog):
        game, _ = _make_game()
        with caplog.at_level(logging.WARNING):
            assert not game.player_draw()
            assert not game.player_discard(tile("5c"))
            assert not game.process_ai_turn()
            assert not game.player_pass()
            assert not game.next_round()
        assert "action rejected" in caplog.text

    def test_discard_of_tile_not_held(self):
        game, _ = _ready_game()
        stranger = game.hands[1].concealed[0]
        assert not game.player_discard(stranger)
        assert game.state == GameStateKind.PLAYER_DISCARD

    def test_self_win_with_incomplete_hand(self):
        game, _ = _ready_game()
        game.hands[0] = make_hand("123c 456c 789o 234b 5b 6b")
        assert not game.can_player_self_win()
        assert not game.player_self_win()

    def test_kong_not_available(self):
        game, _ = _ready_game()
        game.hands[0] = make_hand("123c 456c 789o 234b 5b 6b")
        assert game.player_kong_options() == []
        assert not game.player_kong(KongType.CONCEALED, key("1c"))


class TestHumanTurn:
    def test_discard_passes_turn(self):
        game, sink = _ready_game()
        _quiet_ai_hands(game)
        discarded = game.hands[0].concealed[0]
        assert game.player_discard(discarded)
        assert game.hands[0].discards == [discarded]
        assert game.game_state.last_discard == discarded
        assert game.state == GameStateKind.AI_TURN
        assert game.game_state.current_player == 1
        assert sink.of_type(AITurnPendingEvent)[-1].seat == 1

    def test_draw(self):
        game, _ = _ready_game()
        game.hands[0] = make_hand("123c 456c 789o 234b 5b")
        game.game_state.state = GameStateKind.PLAYER_TURN
        before = tiles_remaining(game.wall)
        assert game.player_draw()
        assert game.state == GameStateKind.PLAYER_DISCARD
        assert len(game.hands[0].concealed) == 14
        assert tiles_remaining(game.wall) == before - 1
        assert game.game_state.self_drawn
        assert not game.game_state.is_kong_draw

    def test_self_drawn_win(self):
        game, sink = _ready_game()
        game.hands[0] = make_hand("123c 456c 789o 234b 55b")
        assert game.can_player_self_win()
        assert game.player_self_win()
        assert game.state == GameStateKind.ROUND_END
        result = sink.of_type(RoundEndEvent)[0].result
        assert result.type == RoundResultType.SELF_DRAWN_WIN
        assert result.win.winner == 0
        # ping hu + self drawn = 2 fan, 4 points, dealer doubles from everyone
        assert result.payment.deltas == (24, -8, -8, -8)
        assert game.game_state.scores == [10024, 9992, 9992, 9992]
        assert sink.of_type(ScoreChangedEvent)[0].deltas == (24, -8, -8, -8)
        assert _expressions(game) == [Expression.ECSTATIC] + [Expression.ANGRY] * 3

    def test_concealed_kong_draws_replacement(self):
        game, sink = _ready_game()
        game.hands[0] = make_hand("1111c 23o 456o 789b 55w")
        assert game.player_kong_options() == [(KongType.CONCEALED, key("1c"))]
        assert game.player_kong(KongType.CONCEALED, key("1c"))
        hand = game.hands[0]
        assert hand.melds[0].kind == MeldKind.CONCEALED_KONG
        assert len(hand.concealed) == 11
        assert game.state == GameStateKind.PLAYER_DISCARD
        assert game.game_state.is_kong_draw
        assert sink.of_type(MeldEvent)[-1].seat == 0

    def test_exhausted_wall_draws_round(self):
        game, sink = _ready_game()
        game.hands[0] = make_hand("123c 456c 789o 234b 5b")
        game.wall = Wall()
        game.game_state.state = GameStateKind.PLAYER_TURN
        assert game.player_draw()
        assert game.state == GameStateKind.ROUND_END
        result = sink.of_type(RoundEndEvent)[0].result
        assert result.type == RoundResultType.DRAWN_ROUND
        assert result.win is None
        assert game.game_state.scores == [10000] * 4
        assert _expressions(game) == [Expression.WORRIED] * 4


class TestHumanClaims:
    def _ai_discards(self, game: MahjongGame, hand_notation: str, tile_notation: str, seat: int = 3):
        game.hands[seat] = make_hand(hand_notation, seat=seat)
        tile = next(t for t in game.hands[seat].concealed if t.key == key(tile_notation))
        game.game_state.current_player = seat
        game._discard(seat, tile)
        return tile

    def test_prompt_and_pung(self):
        game, sink = _ready_game()
        _quiet_ai_hands(game)
        game.hands[0] = make_hand("55c 123o 456o 789b 12w")
        tile = self._ai_discards(game, "5c 19o 19b 1234w 123d", "5c")
        assert game.state == GameStateKind.CLAIMING
        prompt = sink.of_type(ClaimPromptEvent)[-1]
        assert prompt.from_seat == 3
        assert [o.action for o in prompt.options] == [ClaimAction.PUNG]

        assert game.player_claim(ClaimAction.PUNG)
        assert game.state == GameStateKind.PLAYER_DISCARD
        pung = game.hands[0].melds[0]
        assert pung.kind == MeldKind.PUNG
        assert pung.source_player == 3
        assert tile in pung.tiles
        assert tile not in game.hands[3].discards
        assert len(game.hands[0].concealed) == 11
        assert _expressions(game)[0] == Expression.HAPPY
        assert _expressions(game)[3] == Expression.SURPRISED
        assert not game.game_state.self_drawn

    def test_chow_with_combo(self):
        game, _ = _ready_game()
        _quiet_ai_hands(game)
        game.hands[0] = make_hand("3467c 123o 789b 123w")
        self._ai_discards(game, "5c 19o 19b 1234w 123d", "5c")
        combos = game.game_state.pending_claims[-1].chow_combos
        assert combos == ((key("3c"), key("4c")), (key("4c"), key("6c")), (key("6c"), key("7c")))
        assert not game.player_claim(ClaimAction.CHOW, (key("1c"), key("2c")))
        assert game.player_claim(ClaimAction.CHOW, (key("4c"), key("6c")))
        assert [t.value for t in game.hands[0].melds[0].tiles] == [4, 5, 6]

    def test_action_not_offered(self):
        game, _ = _ready_game()
        _quiet_ai_hands(game)
        game.hands[0] = make_hand("55c 123o 456o 789b 12w")
        self._ai_discards(game, "5c 19o 19b 1234w 123d", "5c")
        assert not game.player_claim(ClaimAction.KONG)
        assert game.state == GameStateKind.CLAIMING

    def test_win_on_discard(self):
        game, sink = _ready_game()
        _quiet_ai_hands(game)
        game.hands[0] = make_hand("123c 456c 789o 234b 5b")
        self._ai_discards(game, "5b 19o 19c 1234w 123d", "5b")
        assert game.game_state.pending_claims[0].action == ClaimAction.WIN
        assert game.player_claim(ClaimAction.WIN)
        result = sink.of_type(RoundEndEvent)[0].result
        assert result.type == RoundResultType.DISCARD_WIN
        assert result.win.from_player == 3
        # ping hu + concealed hand = 2 fan, dealer winner doubles
        assert result.payment.deltas == (8, 0, 0, -8)
        assert _expressions(game) == [
            Expression.ECSTATIC,
            Expression.SURPRISED,
            Expression.SURPRISED,
            Expression.ANGRY,
        ]

    def test_pass_lets_turn_continue(self):
        game, _ = _ready_game()
        _quiet_ai_hands(game)
        game.hands[0] = make_hand("55c 123o 456o 789b 12w")
        self._ai_discards(game, "5c 19o 19b 1234w 123d", "5c")
        assert game.player_pass()
        assert game.state == GameStateKind.PLAYER_TURN
        assert game.game_state.current_player == 0
        assert game.game_state.pending_claims == []

    def test_pass_leaves_discard_to_ai(self):
        game, _ = _ready_game()
        _quiet_ai_hands(game)
        game.hands[0] = make_hand("55c 123o 456o 789b 12w")
        game.hands[2] = make_hand("55c 19o 19b 1234w 123d", seat=2)
        tile = self._ai_discards(game, "5c 19o 19b 1234w 123d", "5c")
        assert game.player_pass()
        assert game.state == GameStateKind.AI_TURN
        claim = game.game_state.pending_ai_claim
        assert (claim.seat, claim.action, claim.from_player) == (2, ClaimAction.PUNG, 3)
        assert claim.tile == tile
        assert game.game_state.current_player == 2


class TestAITurns:
    def test_ai_claim_waits_for_process(self):
        game, sink = _ready_game()
        game.hands[0] = make_hand("5c 123o 456o 789b 11w 22d")
        game.hands[1] = make_hand(NO_CLAIM_HAND, seat=1)
        game.hands[2] = make_hand("55c 19o 19b 1234w 123d", seat=2)
        game.hands[3] = make_hand(NO_CLAIM_HAND, seat=3)
        tile = game.hands[0].concealed[0]

        assert game.player_discard(tile)
        assert game.state == GameStateKind.AI_TURN
        assert game.game_state.current_player == 2
        claim = game.game_state.pending_ai_claim
        assert claim.action == ClaimAction.PUNG
        assert claim.from_player == 0
        assert game.hands[2].melds == []

        assert game.process_ai_turn()
        assert game.game_state.pending_ai_claim is None
        assert game.hands[2].melds[0].source_player == 0
        assert tile not in game.hands[0].discards
        assert len(game.hands[2].discards) == 1
        assert len(game.hands[2].concealed) == 10
        assert game.game_state.last_discard_player == 2

    def test_ai_self_drawn_win(self):
        game, sink = _ready_game()
        game.hands[1] = make_hand("123c 456c 789o 234b 55b", seat=1)
        game.game_state.current_player = 1
        game.game_state.self_drawn = True
        game.game_state.state = GameStateKind.AI_TURN
        assert game.process_ai_turn()
        result = sink.of_type(RoundEndEvent)[0].result
        assert result.win.winner == 1
        assert result.win.self_drawn
        # 2 fan, 4 points; the dealer (seat 0) pays double
        assert result.payment.deltas == (-8, 16, -4, -4)

    def test_ai_draws_and_discards(self):
        game, _ = _ready_game()
        _quiet_ai_hands(game)
        game.hands[0] = make_hand(NO_CLAIM_HAND)
        game.game_state.current_player = 1
        game.game_state.state = GameStateKind.AI_TURN
        before = tiles_remaining(game.wall)
        assert game.process_ai_turn()
        assert tiles_remaining(game.wall) < before
        assert len(game.hands[1].concealed) == 13
        assert len(game.hands[1].discards) == 1


class TestRoundFlow:
    def _drawn_round(self, game: MahjongGame) -> None:
        game.hands[0] = make_hand("123c 456c 789o 234b 5b")
        game.wall = Wall()
        game.game_state.state = GameStateKind.PLAYER_TURN
        game.player_draw()

    def test_drawn_round_rotates_dealer(self):
        game, _ = _ready_game()
        self._drawn_round(game)
        assert game.next_round()
        assert game.game_state.dealer == 1
        assert game.game_state.round_in_wind == 1
        assert game.game_state.total_rounds == 1
        assert game.state == GameStateKind.AI_TURN
        assert game.tile_accounting() == TOTAL_TILES

    def test_dealer_win_keeps_deal(self):
        game, _ = _ready_game()
        game.hands[0] = make_hand("123c 456c 789o 234b 55b")
        game.player_self_win()
        game.next_round()
        assert game.game_state.dealer == 0
        assert game.game_state.round_in_wind == 0
        assert game.state == GameStateKind.PLAYER_DISCARD

    def test_round_cap_ends_match(self):
        game, sink = _ready_game(settings=GameSettings(max_rounds=1))
        self._drawn_round(game)
        assert game.next_round()
        assert game.state == GameStateKind.GAME_END
        ended = sink.of_type(GameEndedEvent)[0]
        assert ended.reason == GameEndReason.MAX_ROUNDS
        assert ended.total_rounds == 1

    def test_restart_after_game_end(self):
        game, _ = _ready_game(settings=GameSettings(max_rounds=1))
        self._drawn_round(game)
        game.next_round()
        assert game.start_game()
        assert game.state == GameStateKind.DICE_ROLL
        assert game.game_state.total_rounds == 0


class TestTableView:
    def test_only_own_concealed_tiles(self):
        game, _ = _ready_game()
        view = game.table_view(1)
        assert view.seat == 1
        assert view.seat_wind == Wind.SOUTH
        assert list(view.concealed) == game.hands[1].concealed
        assert [p.concealed_count for p in view.players] == [14, 13, 13, 13]
        assert view.wall_remaining == tiles_remaining(game.wall)


@pytest.mark.parametrize("difficulty", list(Difficulty))
def test_ai_difficulty_wired_to_seats(difficulty):
    game = MahjongGame(GameSettings(difficulty=difficulty), rng=ScriptedRng())
    assert sorted(game.ai_players) == [1, 2, 3]
    assert all(ai.difficulty == difficulty for ai in game.ai_players.values())


class TestReplacementDraws:
    def _human_draws(self, game: MahjongGame) -> None:
        game.game_state.state = GameStateKind.PLAYER_TURN
        assert game.player_draw()

    def test_bonus_chain_from_dead_wall(self):
        game, sink = _ready_game()
        _stack_table(game, {}, live="1f", dead="7b 2f")
        self._human_draws(game)
        hand = game.hands[0]
        assert [t.key for t in hand.bonus_tiles] == [key("1f"), key("2f")]
        assert len(hand.concealed) == 14
        assert any(t.key == key("7b") for t in hand.concealed)
        assert [e.tile.key for e in sink.of_type(BonusTileEvent)[-2:]] == [key("1f"), key("2f")]
        assert game.wall.dead_wall_tiles == ()
        assert game.state == GameStateKind.PLAYER_DISCARD
        _check_hand_sizes(game)

    def test_replacement_falls_back_to_live_wall(self):
        game, _ = _ready_game()
        _stack_table(game, {}, live="1f 6b")
        before = tiles_remaining(game.wall)
        self._human_draws(game)
        hand = game.hands[0]
        assert [t.key for t in hand.bonus_tiles] == [key("1f")]
        assert any(t.key == key("6b") for t in hand.concealed)
        assert tiles_remaining(game.wall) == before - 2
        assert game.state == GameStateKind.PLAYER_DISCARD
        _check_hand_sizes(game)

    def test_empty_walls_after_bonus_draw_round(self):
        game, sink = _ready_game()
        _stack_table(game, {}, live="1f", spare_to_discards=True)
        self._human_draws(game)
        hand = game.hands[0]
        assert [t.key for t in hand.bonus_tiles] == [key("1f")]
        assert len(hand.concealed) == 13
        assert game.state == GameStateKind.ROUND_END
        assert sink.of_type(RoundEndEvent)[0].result.type == RoundResultType.DRAWN_ROUND
        _check_hand_sizes(game)

    def test_bonus_kong_replacement_with_empty_walls(self):
        game, sink = _ready_game()
        _stack_table(game, {0: "2222c 345c 678o 234b 3d"}, dead="1f", spare_to_discards=True)
        assert game.player_kong(KongType.CONCEALED, key("2c"))
        hand = game.hands[0]
        assert hand.melds[0].kind == MeldKind.CONCEALED_KONG
        assert [t.key for t in hand.bonus_tiles] == [key("1f")]
        assert len(hand.concealed) == 10
        assert sink.of_type(RoundEndEvent)[0].result.type == RoundResultType.DRAWN_ROUND
        assert game.tile_accounting() == TOTAL_TILES


class TestHandSizeRepair:
    def test_long_hand_pushes_excess_to_discards(self, caplog):
        game, _ = _ready_game()
        _stack_table(game, {})
        with caplog.at_level(logging.WARNING):
            game._validate_hand_size(0, before_discard=True)
        assert "hand size repaired" in caplog.text
        assert len(game.hands[0].concealed) == 11
        assert len(game.hands[0].discards) == 2
        _check_hand_sizes(game)

    def test_empty_hand_draws_from_live_wall(self):
        game, _ = _ready_game()
        _stack_table(game, {0: ""}, live="6b 7b")
        game._validate_hand_size(0, before_discard=True)
        assert [t.key for t in game.hands[0].concealed] == [key("6b"), key("7b")]
        _check_hand_sizes(game)

    def test_matching_hand_untouched(self, caplog):
        game, _ = _ready_game()
        _stack_table(game, {})
        with caplog.at_level(logging.WARNING):
            game._validate_hand_size(0, before_discard=False)
        assert "hand size repaired" not in caplog.text
        assert len(game.hands[0].concealed) == 13


class TestKongs:
    def _ai_turn(self, game: MahjongGame, seat: int = 1) -> None:
        game.game_state.current_player = seat
        game.game_state.self_drawn = True
        game.game_state.state = GameStateKind.AI_TURN

    def test_ai_concealed_kong_wins_on_replacement(self):
        game, sink = _ready_game()
        _stack_table(game, {1: "2222c 345c 678o 234b 3d"}, dead="3d")
        self._ai_turn(game)
        assert game.process_ai_turn()
        hand = game.hands[1]
        assert hand.melds[0].kind == MeldKind.CONCEALED_KONG
        assert len(hand.concealed) == 11
        result = sink.of_type(RoundEndEvent)[0].result
        assert result.type == RoundResultType.SELF_DRAWN_WIN
        assert result.win.winner == 1
        assert result.win.scoring.has_rule(FanRule.KONG_REPLACEMENT)
        assert result.win.scoring.has_rule(FanRule.SELF_DRAWN)
        _check_hand_sizes(game)

    def test_ai_added_kong_wins_on_replacement(self):
        game, sink = _ready_game()
        _stack_table(game, {1: "2c 345c 678o 234b 3d"}, dead="3d", pungs={1: "222c"})
        self._ai_turn(game)
        assert game.process_ai_turn()
        hand = game.hands[1]
        assert hand.melds[0].kind == MeldKind.ADDED_KONG
        assert hand.melds[0].source_player == 2
        assert len(hand.melds[0].tiles) == 4
        result = sink.of_type(RoundEndEvent)[0].result
        assert result.win.winner == 1
        assert result.win.self_drawn
        assert result.win.scoring.has_rule(FanRule.KONG_REPLACEMENT)
        _check_hand_sizes(game)

    def test_ai_kong_without_win_discards(self):
        game, _ = _ready_game()
        _stack_table(game, {1: "2222c 345c 678o 234b 3d"}, dead="7b")
        self._ai_turn(game)
        assert game.process_ai_turn()
        hand = game.hands[1]
        assert hand.melds[0].kind == MeldKind.CONCEALED_KONG
        assert len(hand.concealed) == 10
        assert len(hand.discards) == 1
        assert game.game_state.last_discard_player == 1
        _check_hand_sizes(game)

    def test_human_exposed_kong_from_discard(self):
        game, sink = _ready_game()
        _stack_table(game, {0: "666c 234o 78o 2346b 3d", 3: "6c " + QUIET_HAND}, dead="7b")
        six = next(t for t in game.hands[3].concealed if t.key == key("6c"))
        game.game_state.current_player = 3
        game._discard(3, six)
        assert game.state == GameStateKind.CLAIMING
        assert ClaimAction.KONG in [o.action for o in game.game_state.pending_claims]

        assert game.player_claim(ClaimAction.KONG)
        hand = game.hands[0]
        kong = hand.melds[0]
        assert kong.kind == MeldKind.EXPOSED_KONG
        assert kong.source_player == 3
        assert six in kong.tiles
        assert six not in game.hands[3].discards
        assert any(t.key == key("7b") for t in hand.concealed)
        assert len(hand.concealed) == 11
        assert game.state == GameStateKind.PLAYER_DISCARD
        assert game.game_state.self_drawn
        assert game.game_state.is_kong_draw
        assert sink.of_type(MeldEvent)[-1].from_seat == 3
        _check_hand_sizes(game)

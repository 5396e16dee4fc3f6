"""
Unattended matches: the human seat is played by an AIPlayer.

Used by bin/simulate.py for batch runs and by the whole-match tests.
"""

from __future__ import annotations

import hashlib
from typing import TYPE_CHECKING

import structlog
from pydantic import BaseModel, ConfigDict

from hkmj.logic.ai_player import AIPlayer
from hkmj.logic.enums import ClaimAction, GameEndReason, GameStateKind
from hkmj.logic.exceptions import InvalidActionError
from hkmj.logic.game import MahjongGame
from hkmj.logic.rng import TableRng
from hkmj.logic.settings import HUMAN_SEAT, GameSettings
from hkmj.shared.logging import bind_match_context

if TYPE_CHECKING:
    from collections.abc import Callable

    from hkmj.logic.events import EventSink

logger = structlog.get_logger()


class MatchSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    seed: str
    scores: tuple[int, ...]
    total_rounds: int
    reason: GameEndReason | None
    steps: int


def seed_for_match(base_seed: str, index: int) -> str:
    """First match uses the base seed; later ones hash it with their index."""
    if index == 0:
        return base_seed
    return hashlib.sha256(bytes.fromhex(base_seed) + index.to_bytes(4, "big")).hexdigest()


def autoplay_step(game: MahjongGame, driver: AIPlayer) -> None:
    """Advance the table by one public action, choosing for the human seat with driver."""
    state = game.state
    if state == GameStateKind.PLAYER_TURN:
        game.player_draw()
    elif state == GameStateKind.PLAYER_DISCARD:
        if game.can_player_self_win():
            game.player_self_win()
        else:
            game.player_discard(driver.choose_discard(game.hands[HUMAN_SEAT], game.table_view(HUMAN_SEAT)))
    elif state == GameStateKind.CLAIMING:
        offered = [option.action for option in game.game_state.pending_claims]
        if ClaimAction.WIN in offered:
            game.player_claim(ClaimAction.WIN)
        else:
            game.player_pass()
    elif state == GameStateKind.AI_TURN:
        game.process_ai_turn()
    elif state == GameStateKind.ROUND_END:
        game.next_round()
    else:
        raise InvalidActionError(f"cannot autoplay from state {state}")


def play_match(
    settings: GameSettings,
    seed: str,
    *,
    sink: EventSink | None = None,
    max_steps: int = 20000,
    on_step: Callable[[MahjongGame], None] | None = None,
) -> tuple[MahjongGame, MatchSummary]:
    """Play one match from the dice roll to GAME_END."""
    rng = TableRng(seed)
    game = MahjongGame(settings, rng=rng, sink=sink)
    driver = AIPlayer(settings.difficulty, rng)

    game.start_game()
    game.roll_dice()
    game.confirm_dice()
    steps = 0
    while game.state != GameStateKind.GAME_END:
        if steps >= max_steps:
            raise InvalidActionError(f"match did not finish within {max_steps} steps (state {game.state})")
        autoplay_step(game, driver)
        steps += 1
        if on_step is not None:
            on_step(game)

    summary = MatchSummary(
        seed=seed,
        scores=tuple(game.game_state.scores),
        total_rounds=game.game_state.total_rounds,
        reason=game.game_state.end_reason,
        steps=steps,
    )
    return game, summary


def run_matches(
    settings: GameSettings,
    *,
    games: int,
    base_seed: str,
    max_steps: int = 20000,
) -> list[MatchSummary]:
    summaries = []
    for index in range(games):
        seed = seed_for_match(base_seed, index)
        bind_match_context(seed=seed, match=index)
        _, summary = play_match(settings, seed, max_steps=max_steps)
        logger.info("match finished", scores=list(summary.scores), rounds=summary.total_rounds, reason=summary.reason)
        summaries.append(summary)
    return summaries

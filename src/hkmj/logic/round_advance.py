"""Decide dealer rotation, wind progression and match end between rounds."""

from __future__ import annotations

from dataclasses import dataclass, replace

from hkmj.logic.enums import GameEndReason, Wind
from hkmj.logic.settings import NUM_PLAYERS, ROUNDS_PER_WIND


@dataclass(frozen=True)
class RoundAdvance:
    """Where the match goes after a finished round.

    When ``game_over`` is set the seat fields carry the unchanged values.
    """

    dealer: int
    round_wind: int
    round_in_wind: int
    game_over: bool = False
    reason: GameEndReason | None = None


def compute_round_advance(
    *,
    scores: list[int],
    total_rounds: int,
    max_rounds: int,
    dealer: int,
    round_wind: int,
    round_in_wind: int,
    winner: int | None,
) -> RoundAdvance:
    """
    Compute the next dealer and wind.

    The match ends when a score drops to zero or below, when the total round
    cap is reached, or after the fourth dealer of the North wind loses the
    deal. The dealer keeps the deal only by winning; drawn rounds rotate.
    """
    unchanged = RoundAdvance(dealer=dealer, round_wind=round_wind, round_in_wind=round_in_wind)
    if any(score <= 0 for score in scores):
        return replace(unchanged, game_over=True, reason=GameEndReason.BANKRUPTCY)
    if total_rounds >= max_rounds:
        return replace(unchanged, game_over=True, reason=GameEndReason.MAX_ROUNDS)

    if winner == dealer:
        return unchanged

    next_dealer = (dealer + 1) % NUM_PLAYERS
    next_round_in_wind = round_in_wind + 1
    if next_round_in_wind < ROUNDS_PER_WIND:
        return RoundAdvance(dealer=next_dealer, round_wind=round_wind, round_in_wind=next_round_in_wind)

    if round_wind >= Wind.NORTH:
        return replace(unchanged, game_over=True, reason=GameEndReason.NORTH_COMPLETE)
    return RoundAdvance(dealer=next_dealer, round_wind=round_wind + 1, round_in_wind=0)

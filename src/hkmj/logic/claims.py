"""Claim arbitration for discards.

The human seat is offered every legal claim and decides explicitly. AI seats
decide independently; the strongest claim wins by priority (win > kong/pung
> chow). Equal priorities go to the seat evaluated first in seat order,
not to the seat closest to the discarder.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog

from hkmj.logic.ai_heuristics import can_win_with_discard
from hkmj.logic.enums import CLAIM_PRIORITY, ClaimAction
from hkmj.logic.settings import HUMAN_SEAT, NUM_PLAYERS
from hkmj.logic.types import ClaimOption

if TYPE_CHECKING:
    from collections.abc import Callable

    from hkmj.logic.hand import Hand
    from hkmj.logic.tiles import Tile
    from hkmj.logic.types import TableView

logger = structlog.get_logger()


@dataclass(frozen=True)
class ClaimCandidate:
    """One AI seat's decision on a discard."""

    seat: int
    action: ClaimAction

    @property
    def priority(self) -> int:
        return CLAIM_PRIORITY[self.action]


def is_next_seat(seat: int, discarder: int) -> bool:
    """Chow is only legal for the seat right after the discarder."""
    return (discarder + 1) % NUM_PLAYERS == seat


def claim_order(discarder: int) -> list[int]:
    """Seats evaluated for a discard: fixed seat order, discarder skipped."""
    return [seat for seat in range(NUM_PLAYERS) if seat != discarder]


def human_claim_options(hand: Hand, tile: Tile, *, discarder: int, view: TableView) -> list[ClaimOption]:
    """Every claim the human seat may make on tile, strongest first."""
    options: list[ClaimOption] = []
    if can_win_with_discard(hand, tile, view):
        options.append(ClaimOption(action=ClaimAction.WIN))
    if hand.can_kong_from_discard(tile):
        options.append(ClaimOption(action=ClaimAction.KONG))
    if hand.can_pung(tile):
        options.append(ClaimOption(action=ClaimAction.PUNG))
    if is_next_seat(HUMAN_SEAT, discarder):
        combos = hand.chow_options(tile)
        if combos:
            options.append(ClaimOption(action=ClaimAction.CHOW, chow_combos=tuple(combos)))
    return options


def pick_best_claim(candidates: list[ClaimCandidate]) -> ClaimCandidate | None:
    """
    Pick the highest-priority claim.

    Candidates must be in evaluation order; a later candidate replaces the
    current best only with strictly higher priority.
    """
    best: ClaimCandidate | None = None
    for candidate in candidates:
        if best is None or candidate.priority > best.priority:
            best = candidate
    return best


def arbitrate_ai_claims(
    discarder: int,
    decide: Callable[[int, bool], ClaimAction | None],
) -> ClaimCandidate | None:
    """
    Collect each AI seat's decision and return the winning claim.

    decide(seat, can_chow) returns the seat's claim or None.
    """
    candidates: list[ClaimCandidate] = []
    for seat in claim_order(discarder):
        if seat == HUMAN_SEAT:
            continue
        action = decide(seat, is_next_seat(seat, discarder))
        if action is not None:
            candidates.append(ClaimCandidate(seat=seat, action=action))
    best = pick_best_claim(candidates)
    if best is not None:
        logger.debug(
            "claim resolved",
            seat=best.seat,
            action=best.action,
            contenders=[c.seat for c in candidates],
        )
    return best

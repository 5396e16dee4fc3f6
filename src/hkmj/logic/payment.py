"""
Round payments, including bao (responsibility) for self-drawn wins.

Base points come from fan_to_points(total_fan). Dealer involvement doubles a
payment: on a self-draw every payer doubles when the dealer wins, otherwise
only the dealer-payer doubles; on a discard win the discarder doubles when
either side is the dealer.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from hkmj.logic.enums import BaoRule, Suit
from hkmj.logic.melds import Meld
from hkmj.logic.scoring import fan_to_points
from hkmj.logic.settings import NUM_PLAYERS

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

BAO_MULTIPLIER = 3
DEALER_MULTIPLIER = 2
BAO_DRAGON_MELDS = 3
BAO_WIND_MELDS = 4
BAO_FLUSH_MELDS = 4
BAO_FLUSH_TILES = 12
BAO_KONGS = 4

SEAT_NAMES = ("You", "Right", "Opposite", "Left")


class PaymentResult(BaseModel):
    """Per-seat score deltas for one round. Deltas always sum to zero."""

    model_config = ConfigDict(frozen=True)

    deltas: tuple[int, ...] = (0,) * NUM_PLAYERS
    details: tuple[str, ...] = ()
    responsible: int | None = None
    bao_rule: BaoRule | None = None


def seat_name(seat: int) -> str:
    return SEAT_NAMES[seat] if 0 <= seat < len(SEAT_NAMES) else f"Seat {seat}"


def _dragon_melds(melds: Sequence[Meld]) -> list[Meld]:
    return [m for m in melds if m.key.suit == Suit.DRAGON]


def _wind_melds(melds: Sequence[Meld]) -> list[Meld]:
    return [m for m in melds if m.key.suit == Suit.WIND]


def _exposed_flush_melds(melds: Sequence[Meld]) -> list[Meld]:
    if len(melds) < BAO_FLUSH_MELDS or sum(len(m.tiles) for m in melds) < BAO_FLUSH_TILES:
        return []
    suits = {m.key.suit for m in melds}
    if len(suits) != 1 or not melds[0].key.is_number_suit:
        return []
    return list(melds)


def _kong_melds(melds: Sequence[Meld]) -> list[Meld]:
    return [m for m in melds if m.is_kong]


# (rule, melds qualifying for it, how many are needed), checked in order
_BAO_CHECKS: tuple[tuple[BaoRule, Callable[[Sequence[Meld]], list[Meld]], int], ...] = (
    (BaoRule.BIG_THREE_DRAGONS, _dragon_melds, BAO_DRAGON_MELDS),
    (BaoRule.BIG_FOUR_WINDS, _wind_melds, BAO_WIND_MELDS),
    (BaoRule.EXPOSED_CLEAN_FLUSH, _exposed_flush_melds, BAO_FLUSH_MELDS),
    (BaoRule.FOUR_KONGS, _kong_melds, BAO_KONGS),
)


def find_responsible_player(melds: Sequence[Meld], winner: int) -> tuple[int, BaoRule] | None:
    """
    Return (seat, rule) of the player liable for a self-drawn win, or None.

    The feeder of the last qualifying meld is liable. A rule whose last meld
    was not fed by another player does not apply and the next rule is checked.
    """
    if not melds:
        return None
    for rule, qualifying, needed in _BAO_CHECKS:
        matched = qualifying(melds)
        if len(matched) < needed:
            continue
        feeder = matched[-1].source_player
        if feeder is not None and feeder != winner:
            return feeder, rule
    return None


def drawn_round_payment() -> PaymentResult:
    return PaymentResult(details=("Drawn round: no payments",))


def calculate_payment(
    *,
    winner: int,
    dealer: int,
    total_fan: int,
    self_drawn: bool,
    from_player: int | None,
    winner_melds: Sequence[Meld],
) -> PaymentResult:
    """Compute score deltas for a won round."""
    deltas = [0] * NUM_PLAYERS
    base = fan_to_points(total_fan)

    if self_drawn:
        bao = find_responsible_player(winner_melds, winner)
        if bao is not None:
            responsible, rule = bao
            total = base * BAO_MULTIPLIER
            deltas[responsible] -= total
            deltas[winner] += total
            detail = f"Bao ({rule.value}): {seat_name(responsible)} pays all {total} points"
            return PaymentResult(deltas=tuple(deltas), details=(detail,), responsible=responsible, bao_rule=rule)

        for seat in range(NUM_PLAYERS):
            if seat == winner:
                continue
            pay = base * DEALER_MULTIPLIER if dealer in (winner, seat) else base
            deltas[seat] -= pay
            deltas[winner] += pay
        details = (
            f"Self-drawn: each player pays {base} points (dealer pays or receives double)",
            f"Total +{deltas[winner]} points",
        )
        return PaymentResult(deltas=tuple(deltas), details=details)

    if from_player is None:
        raise ValueError("discard win requires the discarding seat")
    pay = base * DEALER_MULTIPLIER if dealer in (winner, from_player) else base
    deltas[from_player] -= pay
    deltas[winner] += pay
    return PaymentResult(deltas=tuple(deltas), details=(f"Discard win: {seat_name(from_player)} pays {pay} points",))

"""
String enum definitions for Hong Kong Mahjong concepts.
"""

from enum import Enum, IntEnum


class Suit(str, Enum):
    """Tile suits, including the bonus flower and season sets."""

    CHARACTERS = "characters"
    CIRCLES = "circles"
    BAMBOO = "bamboo"
    WIND = "wind"
    DRAGON = "dragon"
    FLOWER = "flower"
    SEASON = "season"


NUMBER_SUITS: tuple[Suit, ...] = (Suit.CHARACTERS, Suit.CIRCLES, Suit.BAMBOO)
HONOUR_SUITS: tuple[Suit, ...] = (Suit.WIND, Suit.DRAGON)
BONUS_SUITS: tuple[Suit, ...] = (Suit.FLOWER, Suit.SEASON)


class Wind(IntEnum):
    """Seat and prevailing winds. Dealer is always East."""

    EAST = 1
    SOUTH = 2
    WEST = 3
    NORTH = 4


class Dragon(IntEnum):
    """Dragon tile values."""

    RED = 1
    GREEN = 2
    WHITE = 3


class MeldKind(str, Enum):
    """Types of melds a hand can expose or declare."""

    CHOW = "chow"
    PUNG = "pung"
    CONCEALED_KONG = "concealed_kong"
    EXPOSED_KONG = "exposed_kong"
    ADDED_KONG = "added_kong"

    @property
    def is_kong(self) -> bool:
        return self in (MeldKind.CONCEALED_KONG, MeldKind.EXPOSED_KONG, MeldKind.ADDED_KONG)


class SetKind(str, Enum):
    """Set shapes found by hand decomposition."""

    CHOW = "chow"
    PUNG = "pung"


class SpecialHand(str, Enum):
    """Whole-hand shapes that bypass the standard 4 sets + pair search."""

    SEVEN_PAIRS = "seven_pairs"
    THIRTEEN_ORPHANS = "thirteen_orphans"


class ClaimAction(str, Enum):
    """Actions a seat may take on another player's discard."""

    WIN = "win"
    KONG = "kong"
    PUNG = "pung"
    CHOW = "chow"


# priority order for discard claims: win > kong/pung > chow
CLAIM_PRIORITY: dict[ClaimAction, int] = {
    ClaimAction.WIN: 3,
    ClaimAction.KONG: 2,
    ClaimAction.PUNG: 2,
    ClaimAction.CHOW: 1,
}


class KongType(str, Enum):
    """Kongs declared on a player's own turn."""

    CONCEALED = "concealed"
    ADDED = "added"


class GameStateKind(str, Enum):
    """States of the table state machine."""

    MENU = "menu"
    DICE_ROLL = "dice_roll"
    PLAYER_TURN = "player_turn"
    PLAYER_DISCARD = "player_discard"
    AI_TURN = "ai_turn"
    CLAIMING = "claiming"
    ROUND_END = "round_end"
    GAME_END = "game_end"


class Difficulty(str, Enum):
    """AI difficulty tiers."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class Expression(str, Enum):
    """Expression tags carried by seat characters for the presentation layer."""

    NEUTRAL = "neutral"
    THINKING = "thinking"
    HAPPY = "happy"
    SURPRISED = "surprised"
    ECSTATIC = "ecstatic"
    ANGRY = "angry"
    WORRIED = "worried"
    SMIRK = "smirk"


class FanRule(str, Enum):
    """Scoring rules that can appear in a fan breakdown."""

    THIRTEEN_ORPHANS = "thirteen_orphans"
    SEVEN_PAIRS = "seven_pairs"
    ALL_HONOURS = "all_honours"
    NINE_GATES = "nine_gates"
    ALL_PUNGS = "all_pungs"
    MIXED_FLUSH = "mixed_flush"
    CLEAN_FLUSH = "clean_flush"
    PING_HU = "ping_hu"
    RED_DRAGON = "red_dragon"
    GREEN_DRAGON = "green_dragon"
    WHITE_DRAGON = "white_dragon"
    SEAT_WIND = "seat_wind"
    ROUND_WIND = "round_wind"
    SELF_DRAWN = "self_drawn"
    CONCEALED_HAND = "concealed_hand"
    LAST_TILE = "last_tile"
    KONG_REPLACEMENT = "kong_replacement"
    SMALL_THREE_DRAGONS = "small_three_dragons"
    BIG_THREE_DRAGONS = "big_three_dragons"
    SMALL_FOUR_WINDS = "small_four_winds"
    BIG_FOUR_WINDS = "big_four_winds"
    ALL_FLOWERS = "all_flowers"
    ALL_SEASONS = "all_seasons"
    SEAT_FLOWER = "seat_flower"
    SEAT_SEASON = "seat_season"
    EIGHT_BONUS_TILES = "eight_bonus_tiles"


DRAGON_FAN_RULES: dict[int, FanRule] = {
    Dragon.RED: FanRule.RED_DRAGON,
    Dragon.GREEN: FanRule.GREEN_DRAGON,
    Dragon.WHITE: FanRule.WHITE_DRAGON,
}


class BaoRule(str, Enum):
    """Responsibility (bao) conditions for self-drawn wins."""

    BIG_THREE_DRAGONS = "big_three_dragons"
    BIG_FOUR_WINDS = "big_four_winds"
    EXPOSED_CLEAN_FLUSH = "exposed_clean_flush"
    FOUR_KONGS = "four_kongs"


class GameEndReason(str, Enum):
    """Why a match finished."""

    BANKRUPTCY = "bankruptcy"
    MAX_ROUNDS = "max_rounds"
    NORTH_COMPLETE = "north_complete"


class RoundResultType(str, Enum):
    """Types of round end results."""

    SELF_DRAWN_WIN = "self_drawn_win"
    DISCARD_WIN = "discard_win"
    DRAWN_ROUND = "drawn_round"

"""Typed domain exceptions for game rule violations.

Hand-level operations raise subclasses of GameRuleError when asked to do
something the tiles do not allow. The table state machine checks state and legality
before calling them and rejects illegal actions itself, so none of these
escape to collaborators during normal play.
"""


class GameRuleError(Exception):
    """Base exception for game rule violations."""


class InvalidDiscardError(GameRuleError):
    """Tile cannot be discarded (not in the concealed hand)."""


class InvalidMeldError(GameRuleError):
    """Meld cannot be formed (required tiles missing, no pung to extend, etc.)."""


class InvalidActionError(GameRuleError):
    """Action is not valid in the current game state."""


class UnsupportedSettingsError(GameRuleError):
    """Game settings contain values the engine cannot honour."""

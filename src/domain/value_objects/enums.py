from enum import Enum


class Side(str, Enum):
    HOME = "home"
    AWAY = "away"


class SkipReason(str, Enum):
    BLANK_TEAM = "BLANK_TEAM"
    UNPARSABLE_RESULT = "UNPARSABLE_RESULT"


class AnchorKind(str, Enum):
    """How a suspension window was anchored in the club's schedule."""

    TRIGGER_MATCH = "TRIGGER_MATCH"
    CREATED_AT = "CREATED_AT"
    UNRESOLVED = "UNRESOLVED"


class FixtureSortKey(str, Enum):
    DATE = "date"
    ROUND = "round"

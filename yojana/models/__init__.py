from yojana.models.matching import MatchedScheme, MatchingFactor
from yojana.models.scheme import CLOSED_DEADLINE, ONGOING_DEADLINE, SchemeRecord
from yojana.models.user_profile import UserProfile

__all__ = [
    "CLOSED_DEADLINE",
    "MatchedScheme",
    "MatchingFactor",
    "ONGOING_DEADLINE",
    "SchemeRecord",
    "UserProfile",
]

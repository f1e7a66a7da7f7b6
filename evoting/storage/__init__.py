from .candidates import CandidateLedger
from .ids import parse_object_id
from .users import UserStore

__all__ = ["CandidateLedger", "UserStore", "parse_object_id"]

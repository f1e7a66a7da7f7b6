# evoting/voting.py
import logging
from typing import Any, Dict, List

from .errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from .metrics import vote_rejections, votes_cast
from .schemas import Role
from .storage import CandidateLedger, UserStore

logger = logging.getLogger(__name__)


async def cast_vote(users: UserStore, ledger: CandidateLedger, user: Dict[str, Any], candidate_id: str) -> Dict[str, Any]:
    """
    Record ``user``'s single vote for ``candidate_id``.

    Checks run in order and stop at the first failure: the candidate must
    exist (404), the user must hold the voter role (403) and must not have
    voted yet (409).

    The user's vote slot is claimed first with a conditional update, so a
    concurrent or retried duplicate request loses the claim and gets 409
    instead of counting twice. If the ledger append then fails, the claim is
    released before the error propagates.
    """
    try:
        candidate = await ledger.get(candidate_id)
    except ValidationError:
        # a malformed id cannot name any candidate
        candidate = None
    if candidate is None:
        vote_rejections.labels(reason="not_found").inc()
        raise NotFoundError("Candidate not found")
    if Role(user["role"]) is not Role.VOTER:
        vote_rejections.labels(reason="forbidden").inc()
        raise ForbiddenError("Only voters are allowed to vote")
    if user.get("hasVoted"):
        vote_rejections.labels(reason="already_voted").inc()
        raise ConflictError("You have already voted")

    claimed = await users.claim_vote(user["_id"])
    if claimed is None:
        vote_rejections.labels(reason="already_voted").inc()
        raise ConflictError("You have already voted")

    try:
        recorded = await ledger.append_vote(candidate["_id"], user["_id"])
    except Exception:
        await users.release_vote(user["_id"])
        raise
    if not recorded:
        # candidate removed between the lookup and the append
        await users.release_vote(user["_id"])
        raise NotFoundError("Candidate not found")

    votes_cast.inc()
    logger.info(f"Vote recorded for candidate {candidate['_id']}")
    return claimed


async def vote_count(ledger: CandidateLedger) -> List[Dict[str, Any]]:
    return [
        {"name": c["name"], "party": c["party"], "voteCount": c.get("voteCount", 0)}
        for c in await ledger.tally()
    ]

from typing import Any, Dict, List

from fastapi import APIRouter, Depends

from ..dependencies import get_candidate_ledger, get_current_user, get_user_store, require_roles
from ..schemas import CandidateCreate, CandidateOut, CandidateUpdate, Role, TallyEntry, candidate_out
from ..storage import CandidateLedger, UserStore
from ..voting import cast_vote, vote_count

router = APIRouter(prefix="/api/candidates", tags=["Candidates"])

admin_only = require_roles(Role.ADMIN)


@router.post("")
async def add_candidate(
    data: CandidateCreate,
    _admin: Dict[str, Any] = Depends(admin_only),
    ledger: CandidateLedger = Depends(get_candidate_ledger),
):
    candidate = await ledger.add(data.model_dump())
    return {"candidate": candidate_out(candidate)}


@router.get("/vote/count", response_model=List[TallyEntry])
async def voting_count(
    _user: Dict[str, Any] = Depends(get_current_user),
    ledger: CandidateLedger = Depends(get_candidate_ledger),
):
    return await vote_count(ledger)


@router.post("/vote/{candidate_id}")
async def vote(
    candidate_id: str,
    user: Dict[str, Any] = Depends(get_current_user),
    users: UserStore = Depends(get_user_store),
    ledger: CandidateLedger = Depends(get_candidate_ledger),
):
    await cast_vote(users, ledger, user, candidate_id)
    return {"message": "Vote recorded successfully"}


@router.get("", response_model=List[CandidateOut])
async def get_all_candidates(
    _user: Dict[str, Any] = Depends(get_current_user),
    ledger: CandidateLedger = Depends(get_candidate_ledger),
):
    return [candidate_out(c) for c in await ledger.list_all()]


@router.put("/{candidate_id}")
async def update_candidate(
    candidate_id: str,
    patch: CandidateUpdate,
    _admin: Dict[str, Any] = Depends(admin_only),
    ledger: CandidateLedger = Depends(get_candidate_ledger),
):
    candidate = await ledger.update(candidate_id, patch.model_dump(exclude_none=True))
    return {"candidate": candidate_out(candidate)}


@router.delete("/{candidate_id}")
async def delete_candidate(
    candidate_id: str,
    _admin: Dict[str, Any] = Depends(admin_only),
    ledger: CandidateLedger = Depends(get_candidate_ledger),
):
    await ledger.delete(candidate_id)
    return {"message": "Candidate deleted"}

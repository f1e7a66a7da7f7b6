# evoting/storage/candidates.py
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pymongo import ReturnDocument

from ..errors import ConflictError, NotFoundError, ValidationError
from .ids import parse_object_id

logger = logging.getLogger(__name__)

# Fields an admin may change; votes and voteCount only move through append_vote
PATCHABLE_FIELDS = ("name", "party", "age")


class CandidateLedger:
    """Candidates with their embedded vote records and denormalized tally."""

    def __init__(self, collection):
        self.collection = collection

    async def add(self, candidate: Dict[str, Any]) -> Dict[str, Any]:
        now = datetime.now(timezone.utc)
        data = {k: candidate[k] for k in PATCHABLE_FIELDS}
        data.update({"votes": [], "voteCount": 0, "createdAt": now, "updatedAt": now})
        result = await self.collection.insert_one(data)
        data["_id"] = result.inserted_id
        logger.info(f"Candidate {result.inserted_id} ({data['name']}) added")
        return data

    async def get(self, candidate_id) -> Optional[Dict[str, Any]]:
        return await self.collection.find_one({"_id": parse_object_id(candidate_id, "candidate ID")})

    async def update(self, candidate_id, patch: Dict[str, Any]) -> Dict[str, Any]:
        changes = {k: v for k, v in patch.items() if k in PATCHABLE_FIELDS and v is not None}
        if not changes:
            raise ValidationError("No updatable fields provided")
        changes["updatedAt"] = datetime.now(timezone.utc)
        updated = await self.collection.find_one_and_update(
            {"_id": parse_object_id(candidate_id, "candidate ID")},
            {"$set": changes},
            return_document=ReturnDocument.AFTER,
        )
        if updated is None:
            raise NotFoundError("Candidate not found")
        logger.info(f"Candidate {candidate_id} updated: {sorted(changes)}")
        return updated

    async def delete(self, candidate_id) -> None:
        oid = parse_object_id(candidate_id, "candidate ID")
        # only candidates without recorded votes may go, keeping the tally whole
        result = await self.collection.delete_one({"_id": oid, "voteCount": 0})
        if result.deleted_count:
            logger.info(f"Candidate {candidate_id} deleted")
            return
        if await self.collection.find_one({"_id": oid}, {"_id": 1}) is None:
            raise NotFoundError("Candidate not found")
        raise ConflictError("Candidate has recorded votes and cannot be deleted")

    async def list_all(self) -> List[Dict[str, Any]]:
        candidates = []
        async for candidate in self.collection.find({}, {"votes": 0}):
            candidates.append(candidate)
        return candidates

    async def append_vote(self, candidate_id, voter_id) -> bool:
        """
        Record one vote: push the vote record and bump voteCount together.

        Returns:
            True if the candidate existed and the vote was recorded
        """
        vote = {"user": parse_object_id(voter_id, "user ID"), "votedAt": datetime.now(timezone.utc)}
        result = await self.collection.update_one(
            {"_id": parse_object_id(candidate_id, "candidate ID")},
            {"$push": {"votes": vote}, "$inc": {"voteCount": 1}},
        )
        return result.matched_count == 1

    async def tally(self) -> List[Dict[str, Any]]:
        """Candidates ordered by descending voteCount (name breaks ties)."""
        results = []
        cursor = self.collection.find(
            {}, {"name": 1, "party": 1, "voteCount": 1}, sort=[("voteCount", -1), ("name", 1)]
        )
        async for candidate in cursor:
            results.append(candidate)
        return results

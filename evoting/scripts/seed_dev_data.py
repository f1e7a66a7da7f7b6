# Development seed: indexes, a default admin and sample candidates.
# Run with: python -m evoting.scripts.seed_dev_data
import asyncio
import logging
import os

from ..config import load_settings
from ..database import MongoConnector
from ..schemas import Role
from ..storage import CandidateLedger, UserStore

logger = logging.getLogger(__name__)

DEV_ADMIN = {
    "name": "Development Admin",
    "age": 30,
    "email": "admin@votingapp.com",
    "mobile": "1234567890",
    "address": "Development Environment",
    "nationalId": "123456789012",
    "role": Role.ADMIN.value,
}

SAMPLE_VOTERS = [
    {
        "name": "Test Voter 1",
        "age": 25,
        "email": "voter1@votingapp.com",
        "mobile": "9876543210",
        "address": "123 Test Street, Dev City",
        "nationalId": "234567890123",
        "role": Role.VOTER.value,
    },
    {
        "name": "Test Voter 2",
        "age": 30,
        "email": "voter2@votingapp.com",
        "mobile": "9876543211",
        "address": "456 Test Avenue, Dev City",
        "nationalId": "345678901234",
        "role": Role.VOTER.value,
    },
]

SAMPLE_CANDIDATES = [
    {"name": "Alice Johnson", "party": "Democratic Party", "age": 45},
    {"name": "Bob Smith", "party": "Republican Party", "age": 52},
    {"name": "Carol Williams", "party": "Independent", "age": 38},
]


async def seed(connector: MongoConnector, admin_password: str, voter_password: str):
    await connector.ensure_indexes()

    users = UserStore(connector.users_collection)
    if not await users.admin_exists():
        await users.create({**DEV_ADMIN, "password": admin_password})
        print(f"Default admin created: national ID {DEV_ADMIN['nationalId']}")

    for voter in SAMPLE_VOTERS:
        if await users.find_by_national_id(voter["nationalId"]) is None:
            await users.create({**voter, "password": voter_password})
            print(f"Test voter created: national ID {voter['nationalId']}")

    ledger = CandidateLedger(connector.candidates_collection)
    if not await ledger.list_all():
        for candidate in SAMPLE_CANDIDATES:
            await ledger.add(candidate)
        print(f"Created {len(SAMPLE_CANDIDATES)} sample candidates")


async def main():
    logging.basicConfig(level=logging.INFO)
    connector = MongoConnector(load_settings())
    try:
        await seed(
            connector,
            os.getenv("DEV_ADMIN_PASSWORD", "admin123"),
            os.getenv("DEV_VOTER_PASSWORD", "voter123"),
        )
    finally:
        connector.close()


if __name__ == "__main__":
    asyncio.run(main())

import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from pymongo.errors import PyMongoError

from ..database import MongoConnector
from ..dependencies import get_connector
from ..metrics import APP_VERSION, START_TIME

router = APIRouter(tags=["Health"])


async def _database_connected(connector: MongoConnector) -> bool:
    try:
        return await connector.ping()
    except PyMongoError:
        return False


@router.get("/health")
async def health_check(connector: MongoConnector = Depends(get_connector)):
    connected = await _database_connected(connector)
    body = {
        "status": "OK" if connected else "UNHEALTHY",
        "message": "Voting app is running" if connected else "Database connection is not healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": int(time.monotonic() - START_TIME),
        "version": APP_VERSION,
        "database": {"status": "connected" if connected else "disconnected", "connected": connected},
    }
    return JSONResponse(status_code=200 if connected else 503, content=body)


@router.get("/ready")
async def readiness_check(connector: MongoConnector = Depends(get_connector)):
    if not await _database_connected(connector):
        return JSONResponse(
            status_code=503,
            content={"status": "NOT_READY", "message": "Database connection is not ready"},
        )
    return {"status": "READY", "message": "Application is ready to serve requests"}


@router.get("/metrics")
async def metrics():
    """Prometheus metrics endpoint."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

# main.py
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import ConnectionFailure

from .config import Settings, load_settings
from .database import MongoConnector
from .errors import TransientError, VotingAppError
from .routes.candidate_routes import router as candidate_router
from .routes.health_routes import router as health_router
from .routes.user_routes import router as user_router
from .security import TokenService

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, mongo_client=None) -> FastAPI:
    """Build the API. ``mongo_client`` replaces the motor client (used by tests)."""
    if settings is None:
        settings = load_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        connector = MongoConnector(settings, client=mongo_client)
        app.state.mongo = connector
        try:
            await connector.ensure_indexes()
        except ConnectionFailure as e:
            # keep serving; requests will get 503 until the database is back
            logger.error(f"Failed to prepare MongoDB indexes: {e}")
        logger.info(f"Voting app ready on database {settings.mongo_db}")
        yield
        connector.close()

    app = FastAPI(title="E-Voting API", lifespan=lifespan)
    app.state.settings = settings
    app.state.tokens = TokenService(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(VotingAppError)
    async def voting_app_error_handler(request: Request, exc: VotingAppError):
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = [
            {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
            for err in exc.errors()
        ]
        return JSONResponse(status_code=400, content={"detail": errors})

    @app.exception_handler(ConnectionFailure)
    async def storage_unavailable_handler(request: Request, exc: ConnectionFailure):
        logger.error(f"Storage unavailable on {request.method} {request.url.path}: {exc}")
        err = TransientError("Service temporarily unavailable, please retry")
        return JSONResponse(status_code=err.status_code, content={"detail": err.message})

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})

    app.include_router(health_router)
    app.include_router(user_router)
    app.include_router(candidate_router)
    return app


app = create_app()


def run():
    import uvicorn

    settings = app.state.settings
    uvicorn.run("evoting.main:app", host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    run()

import logging

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pymongo.database import Database

from medicamp.constant_file import ACCESS_TOKEN_SECRET, CORS_ORIGINS, LOG_LEVEL, PORT, ROLE_CACHE_SECONDS
from medicamp.database import connect, ensure_indexes, get_db, in_thread
from medicamp.exceptions import register_exception_handlers
from medicamp.security import RoleCache

from medicamp.routes.auth_route import router as AuthRouter
from medicamp.routes.user_route import router as UserRouter
from medicamp.routes.camp_route import router as CampRouter
from medicamp.routes.participant_route import router as ParticipantRouter
from medicamp.routes.payment_route import router as PaymentRouter
from medicamp.routes.dashboard_route import router as DashboardRouter
from medicamp.routes.feedback_route import router as FeedbackRouter
from medicamp.routes.image_route import router as ImageRouter

logger = logging.getLogger(__name__)


def create_app(database: Database = None, token_secret: str = ACCESS_TOKEN_SECRET,
               role_cache_seconds: float = ROLE_CACHE_SECONDS) -> FastAPI:
    logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    app = FastAPI(title="Popular Medical Camp API")
    app.state.db = database if database is not None else connect()
    app.state.token_secret = token_secret
    app.state.role_cache = RoleCache(role_cache_seconds)

    # Allow the server to start even if the database is not reachable yet
    try:
        ensure_indexes(app.state.db)
    except Exception as e:
        logger.warning("Could not create indexes: %s. Database operations will fail until it is reachable.", e)

    app.include_router(AuthRouter, tags=["Auth"])
    app.include_router(UserRouter, tags=["User"])
    app.include_router(CampRouter, tags=["Camp"])
    app.include_router(ParticipantRouter, tags=["Participant"])
    app.include_router(PaymentRouter, tags=["Payment"])
    app.include_router(DashboardRouter, tags=["Dashboard"])
    app.include_router(FeedbackRouter, tags=["Feedback"])
    app.include_router(ImageRouter, tags=["AI Image"])

    register_exception_handlers(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.get("/")
    async def read_root():
        return "Server of Popular Medical Camp is open"

    @app.get("/test")
    async def test_database(db: Database = Depends(get_db)):
        """Check that the database is reachable"""
        response = {
            "backend": "Running",
            "database": db.name,
            "connection_status": "Not Connected",
            "collections": [],
        }
        try:
            response["collections"] = (await in_thread(db.list_collection_names))[:10]
            response["connection_status"] = "Connected"
        except Exception as e:
            logger.warning("Database check failed: %s", e)
            response["connection_status"] = f"Error: {str(e)[:80]}"
        return response

    return app


if __name__ == "__main__":
    import uvicorn

    logger.info("Popular Medical Camp server is running on %s", PORT)
    uvicorn.run(create_app(), host="0.0.0.0", port=PORT)

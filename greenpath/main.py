import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from greenpath.config import Settings, configureLogging, getSettings
from greenpath.db.database import createDbEngine, createSessionFactory, createTables
from greenpath.errors import BookingError
from greenpath.routes.auth import router as authRouter
from greenpath.routes.booking import router as bookingRouter
from greenpath.routes.tour import router as tourRouter

logger = logging.getLogger(__name__)


def createApp(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build one application instance with its own engine and session factory.

    The engine lives on `app.state` and is disposed when the app shuts down.
    """
    settings = settings or getSettings()
    configureLogging(settings.LOG_LEVEL)

    engine = createDbEngine(settings.DATABASE_URL, echo=settings.DB_ECHO)
    if settings.CREATE_TABLES:
        createTables(engine)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("%s starting (%s)", settings.APP_NAME, settings.ENVIRONMENT)
        yield
        app.state.engine.dispose()
        logger.info("%s stopped", settings.APP_NAME)

    app = FastAPI(title=settings.APP_NAME, version=settings.APP_VERSION, lifespan=lifespan)
    app.state.settings = settings
    app.state.engine = engine
    app.state.sessionFactory = createSessionFactory(engine)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(BookingError)
    async def bookingErrorHandler(request: Request, exc: BookingError):
        return JSONResponse(status_code=exc.statusCode, content=exc.toDict())

    @app.exception_handler(RequestValidationError)
    async def requestValidationHandler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=422,
            content={"error": "ValidationError", "detail": jsonable_encoder(exc.errors())}
        )

    app.include_router(authRouter)
    app.include_router(tourRouter)
    app.include_router(bookingRouter)

    @app.get("/")
    def root():
        return {"message": f"Welcome to {settings.APP_NAME}", "version": settings.APP_VERSION}

    @app.get("/health")
    def healthCheck():
        return {
            "status": "OK",
            "service": "greenpath-bookings"
        }

    return app


if __name__ == "__main__":
    import uvicorn

    # uvicorn greenpath.main:createApp --factory
    uvicorn.run("greenpath.main:createApp", factory=True, host="0.0.0.0", port=8000)

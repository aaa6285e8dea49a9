from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from sqlmodel import SQLModel
from .error import ClientError, ServerError
import logging

logger = logging.getLogger(__name__)


async def handle_client_error(request: Request, exc: ClientError):
    error_dict = {"code": exc.base_error.code, "message": exc.base_error.message}
    logger.warning(f"Client error: {error_dict}")
    return JSONResponse(status_code=exc.status_code, content={"error": error_dict})


async def handle_server_error(request: Request, exc: ServerError):
    error_dict = {"code": exc.base_error.code, "message": "Internal server error"}
    logger.error(f"Server error: {exc.base_error.code} {exc.base_error.details}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": error_dict}
    )


def build_lifespan(ApplicationConfig):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Registers every table on SQLModel.metadata
        import conpanion.domain.entities  # noqa: F401
        from conpanion.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
        from conpanion.app.use_cases.notifications import (
            SeedNotificationTemplatesUseCase,
        )
        from conpanion.depends import AsyncSessionLocal, build_delivery_client, engine
        from conpanion.scheduler import build_scheduler

        if ApplicationConfig.DB_AUTO_CREATE:
            async with engine.begin() as conn:
                await conn.run_sync(SQLModel.metadata.create_all)

        async with AsyncSessionLocal() as session:
            await SeedNotificationTemplatesUseCase(SqlAlchemyUnitOfWork(session)).execute()

        scheduler = None
        if ApplicationConfig.SCHEDULER_ENABLED:
            scheduler = build_scheduler(AsyncSessionLocal, build_delivery_client)
            scheduler.start()
            logger.info("Background scheduler started")

        yield

        if scheduler is not None:
            scheduler.shutdown(wait=False)
        await engine.dispose()

    return lifespan


def create_app(ApplicationConfig, lifespan=True) -> FastAPI:
    app = FastAPI(
        title="Conpanion API",
        version="0.1.0",
        lifespan=build_lifespan(ApplicationConfig) if lifespan else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ApplicationConfig.CORS_ORIGINS,
        allow_credentials=ApplicationConfig.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from conpanion.api.routes import (
        admin,
        approvals,
        auth,
        health_check,
        invitation,
        notifications,
        organizations,
        projects,
        tasks,
    )

    prefix = ApplicationConfig.API_PREFIX
    app.include_router(health_check.router, tags=["Health"])
    app.include_router(auth.router, prefix=prefix, tags=["Authentication"])
    app.include_router(organizations.router, prefix=prefix, tags=["Organizations"])
    app.include_router(projects.router, prefix=prefix, tags=["Projects"])
    app.include_router(invitation.router, prefix=prefix, tags=["Invitations"])
    app.include_router(notifications.router, prefix=prefix, tags=["Notifications"])
    app.include_router(tasks.router, prefix=prefix, tags=["Tasks"])
    app.include_router(approvals.router, prefix=prefix, tags=["Approvals"])
    app.include_router(admin.router, prefix=prefix, tags=["Admin"])

    app.add_exception_handler(ClientError, handle_client_error)
    app.add_exception_handler(ServerError, handle_server_error)

    return app

import logging
import time
from contextlib import asynccontextmanager
from uuid import uuid4

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from credentialing.adapter.database import build_engine, build_session_factory, create_schema
from credentialing.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from credentialing.app.services.rbac_seed import seed_rbac

from .envelope import error_response
from .error import ClientError, ServerError

logger = logging.getLogger(__name__)


def _request_id(request: Request):
    return getattr(request.state, "request_id", None)


async def handle_client_error(request: Request, exc: ClientError):
    error = exc.base_error
    logger.warning(f"Client error: {error.code} {error.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(error.code, error.message, _request_id(request), error.details),
    )


async def handle_server_error(request: Request, exc: ServerError):
    error = exc.base_error
    logger.error(f"Server error: {error.code} {error.message}")
    message = error.message
    if exc.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR:
        message = "Internal server error"
    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(error.code, message, _request_id(request)),
    )


async def handle_validation_error(request: Request, exc: RequestValidationError):
    errors = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
            "message": err.get("msg", ""),
        }
        for err in exc.errors()
    ]
    logger.warning(f"Request validation failed: {errors}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_response(
            "VALIDATION_ERROR", "Invalid request data", _request_id(request), {"errors": errors}
        ),
    )


async def handle_storage_error(request: Request, exc: SQLAlchemyError):
    logger.error(f"Storage error: {exc}")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content=error_response(
            "TRANSIENT_STORAGE_ERROR",
            "Storage temporarily unavailable, please retry",
            _request_id(request),
        ),
    )


def create_app(ApplicationConfig) -> FastAPI:
    logging.basicConfig(
        level=getattr(logging, str(ApplicationConfig.LOG_LEVEL).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    engine = build_engine(ApplicationConfig.DB_URI, getattr(ApplicationConfig, "DB_ECHO", False))
    session_factory = build_session_factory(engine)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if ApplicationConfig.AUTO_CREATE_SCHEMA:
            await create_schema(engine)
            async with session_factory() as session:
                await seed_rbac(SqlAlchemyUnitOfWork(session))
        yield
        await engine.dispose()

    app = FastAPI(title="Credentialing API", version="0.1.0", lifespan=lifespan)
    app.state.config = ApplicationConfig
    app.state.engine = engine
    app.state.session_factory = session_factory

    if ApplicationConfig.ENABLE_LOGGING_MIDDLEWARE:

        @app.middleware("http")
        async def log_requests(request: Request, call_next):
            started = time.perf_counter()
            response = await call_next(request)
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.info(
                f"{request.method} {request.url.path} {response.status_code} "
                f"{elapsed_ms:.1f}ms request_id={_request_id(request)}"
            )
            return response

    # Registered last so it runs first and the id is set for everything below
    @app.middleware("http")
    async def assign_request_id(request: Request, call_next):
        request.state.request_id = request.headers.get("X-Request-ID") or str(uuid4())
        response = await call_next(request)
        response.headers["X-Request-ID"] = request.state.request_id
        return response

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ApplicationConfig.CORS_ORIGINS,
        allow_credentials=ApplicationConfig.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from credentialing.api.routes import health_check, organization, verification

    app.include_router(health_check.router, tags=["Health"])
    app.include_router(organization.router, prefix=ApplicationConfig.API_PREFIX)
    app.include_router(verification.router, prefix=ApplicationConfig.API_PREFIX)

    app.add_exception_handler(ClientError, handle_client_error)
    app.add_exception_handler(ServerError, handle_server_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(SQLAlchemyError, handle_storage_error)

    return app

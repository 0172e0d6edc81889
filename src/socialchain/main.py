"""
Main FastAPI application for the SocialChain backend.

``create_app`` builds one application with its own database, session
issuer and authentication services; nothing is shared between apps.
"""

from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from .api.routes import auth, users
from .core.config import BaseConfig, get_config
from .core.config_validator import ConfigValidator
from .core.exceptions import (
    ConfigurationError,
    SocialChainException,
    to_error_body,
    to_http_status,
)
from .core.logging import get_logger, setup_logging
from .core.security import SessionIssuer
from .db.session import Database
from .middleware import AuthenticationMiddleware
from .schemas.base import HealthResponse
from .services.auth_service import AuthService
from .services.challenge_store import ChallengeStore
from .services.identity_resolver import IdentityResolver
from .services.verifiers import VerifierRegistry

logger = get_logger(__name__)

INTERNAL_ERROR_BODY = {"status": "error", "code": "INTERNAL_ERROR", "message": "Internal server error"}


def build_auth_service(config: BaseConfig) -> AuthService:
    """Wire the authentication components from configuration."""
    session_issuer = SessionIssuer(
        secret=config.JWT_SECRET,
        algorithm=config.JWT_ALGORITHM,
        ttl_seconds=config.TOKEN_TTL_SECONDS,
    )
    challenge_store = ChallengeStore(
        ttl_seconds=config.CHALLENGE_TTL_SECONDS,
        app_name=config.SIGN_MESSAGE_APP_NAME,
    )
    return AuthService(
        challenge_store=challenge_store,
        verifiers=VerifierRegistry(),
        identity_resolver=IdentityResolver(),
        session_issuer=session_issuer,
    )


def create_app(config: Optional[BaseConfig] = None, create_tables: bool = False) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        config: Configuration to use, defaults to the one selected by ENVIRONMENT
        create_tables: Create missing tables on startup instead of relying on migrations

    Raises:
        ConfigurationError: The configuration failed validation
    """
    config = config or get_config()
    setup_logging(config)

    errors = ConfigValidator().validate_all(config)
    if errors:
        for error in errors:
            logger.error(f"Configuration error: {error}")
        raise ConfigurationError(f"Invalid configuration: {'; '.join(errors)}")

    app = FastAPI(
        title=config.APP_NAME,
        description="Wallet-authenticated social backend",
        version=config.APP_VERSION,
        debug=config.DEBUG,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_tags=[
            {"name": "Authentication", "description": "Wallet challenge/response login and sessions"},
            {"name": "Users", "description": "Wallet identities"},
            {"name": "System", "description": "System health"},
        ],
    )

    app.state.config = config
    app.state.database = Database(config)
    app.state.auth_service = build_auth_service(config)
    app.state.session_issuer = app.state.auth_service.session_issuer

    def custom_openapi():
        if app.openapi_schema:
            return app.openapi_schema

        from fastapi.openapi.utils import get_openapi

        openapi_schema = get_openapi(
            title=app.title,
            version=app.version,
            description=app.description,
            routes=app.routes,
        )
        openapi_schema.setdefault("components", {})["securitySchemes"] = {
            "BearerAuth": {
                "type": "http",
                "scheme": "bearer",
                "bearerFormat": "JWT",
                "description": "Enter the token obtained from /auth/wallet-login",
            }
        }
        app.openapi_schema = openapi_schema
        return app.openapi_schema

    app.openapi = custom_openapi

    app.add_middleware(AuthenticationMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(auth.router)
    app.include_router(users.router)

    @app.get("/health", response_model=HealthResponse, tags=["System"])
    async def health_check() -> HealthResponse:
        """
        Basic health check endpoint.
        """
        database_ok = await app.state.database.check_health()
        return HealthResponse(
            status="healthy" if database_ok else "degraded",
            app=config.APP_NAME,
            version=config.APP_VERSION,
            environment=config.ENVIRONMENT,
            database="connected" if database_ok else "unavailable",
        )

    @app.exception_handler(SocialChainException)
    async def socialchain_exception_handler(request: Request, exc: SocialChainException):
        """Handle domain exceptions."""
        status_code = to_http_status(exc)
        if status_code >= 500:
            logger.error(f"{exc.code} on {request.url.path}: {exc.message}", exc_info=exc)
        else:
            logger.info(f"{exc.code} on {request.url.path}")
        return JSONResponse(status_code=status_code, content=to_error_body(exc))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle request validation errors without echoing the submitted input."""
        fields = sorted({".".join(str(part) for part in error["loc"][1:]) or "body" for error in exc.errors()})
        logger.info(f"VALIDATION_ERROR on {request.url.path}: {', '.join(fields)}")
        error = SocialChainException(f"Invalid request: {', '.join(fields)}", "VALIDATION_ERROR")
        return JSONResponse(status_code=to_http_status(error), content=to_error_body(error))

    @app.exception_handler(SQLAlchemyError)
    async def database_exception_handler(request: Request, exc: SQLAlchemyError):
        """Handle database errors."""
        logger.error(f"Database error on {request.url.path}: {exc}", exc_info=exc)
        return JSONResponse(status_code=500, content=INTERNAL_ERROR_BODY)

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle general exceptions."""
        logger.error(f"Unhandled exception: {exc}", exc_info=exc)
        return JSONResponse(status_code=500, content=INTERNAL_ERROR_BODY)

    @app.on_event("startup")
    async def startup_event():
        """Handle startup event."""
        logger.info(f"Starting {config.APP_NAME} v{config.APP_VERSION}")
        logger.info(f"Environment: {config.ENVIRONMENT}")

        app.state.database.init()
        if create_tables:
            await app.state.database.create_all()
        logger.info("Database initialized")

    @app.on_event("shutdown")
    async def shutdown_event():
        """Handle shutdown event."""
        logger.info(f"Shutting down {config.APP_NAME}")
        await app.state.database.close()

    return app


if __name__ == "__main__":
    import uvicorn

    settings = get_config()
    uvicorn.run(
        create_app(settings),
        host=settings.API_HOST,
        port=settings.API_PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )

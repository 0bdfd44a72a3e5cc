# finance_copilot/main.py

import logging
from contextlib import asynccontextmanager
from datetime import timedelta
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from finance_copilot.api import auth, chat, transactions
from finance_copilot.config import Settings, configure_logging
from finance_copilot.core.advisor import OpenAIChatProvider
from finance_copilot.core.credentials import build_password_context
from finance_copilot.core.errors import (
    AuthError,
    ConflictError,
    InternalError,
    NotFoundError,
    ValidationError,
)
from finance_copilot.core.sessions import SessionIssuer
from finance_copilot.database import create_db_engine, create_session_factory, init_db


logger = logging.getLogger(__name__)

ENDPOINTS = [
    "POST /api/register",
    "POST /api/login",
    "GET /api/transactions",
    "POST /api/transactions",
    "GET /api/summary",
    "POST /api/chat",
]


def _error(status_code: int, message: str, field: str | None = None) -> JSONResponse:
    content = {"error": message}
    if field:
        content["field"] = field
    return JSONResponse(status_code=status_code, content=content)


def register_exception_handlers(app: FastAPI):

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        return _error(status.HTTP_400_BAD_REQUEST, exc.message, exc.field)

    @app.exception_handler(ConflictError)
    async def conflict_error_handler(request: Request, exc: ConflictError):
        return _error(status.HTTP_400_BAD_REQUEST, exc.message, exc.field)

    @app.exception_handler(AuthError)
    async def auth_error_handler(request: Request, exc: AuthError):
        if exc.reason == AuthError.MISSING:
            return _error(status.HTTP_401_UNAUTHORIZED, exc.message)
        return _error(status.HTTP_403_FORBIDDEN, exc.message)

    @app.exception_handler(InternalError)
    async def internal_error_handler(request: Request, exc: InternalError):
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, exc.message)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        field = None
        if errors and errors[0].get("loc"):
            field = str(errors[0]["loc"][-1])
        logger.info("Rejected request body for %s: %s", request.url.path, errors)
        return _error(status.HTTP_400_BAD_REQUEST, "Invalid request body", field)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            return _error(status.HTTP_404_NOT_FOUND, NotFoundError().message)
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def create_app(settings: Settings | None = None) -> FastAPI:
    if settings is None:
        settings = Settings()
        configure_logging(settings.log_level)

    engine = create_db_engine(settings.database_url)
    init_db(engine)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Finance Copilot backend starting")
        if app.state.provider.configured:
            logger.info("AI provider ready (model=%s)", settings.openai_model)
        else:
            logger.warning("OpenAI API key not configured, chat will use fallback tips")
        logger.info("CORS enabled for %s", ", ".join(settings.cors_origins))
        yield
        logger.info("Shutting down server")
        engine.dispose()
        logger.info("Database closed")

    app = FastAPI(
        title="Finance Copilot API",
        description="Personal finance tracking with an AI advisor",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    app.state.pwd_context = build_password_context(settings.bcrypt_rounds)
    app.state.session_issuer = SessionIssuer(
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
        lifetime=timedelta(minutes=settings.access_token_expire_minutes),
    )
    app.state.provider = OpenAIChatProvider.from_settings(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    @app.get("/")
    def root():
        return {
            "message": "Finance Copilot backend is running",
            "status": "success",
            "features": ["Database", "Authentication", "AI Integration"],
            "endpoints": ENDPOINTS,
        }

    app.include_router(auth.router)
    app.include_router(transactions.router)
    app.include_router(chat.router)

    return app


def run():
    import uvicorn

    settings = Settings()
    configure_logging(settings.log_level)
    logger.info("Server running at http://%s:%s", settings.host, settings.port)
    uvicorn.run(
        "finance_copilot.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
    )


if __name__ == "__main__":
    run()

from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from sendiabete.core.config import Settings, settings as default_settings
from sendiabete.core.errors import InternalFailure, ServiceError
from sendiabete.core.logging_config import bind_request_context, configure_logging, get_logger
from sendiabete.core.security import configure_hashing
from sendiabete.db.store import SqlStore
from sendiabete.integrations.vision import VisionAnalyzer
from sendiabete.services.accounts import AccountLedger
from sendiabete.services.catalog import load_catalog
from sendiabete.services.readings import ReadingLedger
from sendiabete.services.upload import UploadWorkflow

# Import routers
from sendiabete.api.admin import router as admin_router
from sendiabete.api.auth import router as auth_router
from sendiabete.api.licenses import router as licenses_router
from sendiabete.api.readings import router as readings_router

logger = get_logger(__name__)


def create_app(settings: Settings | None = None, analyzer=None) -> FastAPI:
    settings = settings or default_settings
    configure_logging(settings)
    configure_hashing(settings)

    app = FastAPI(title=settings.app_name)

    # Ledgers start from the persisted snapshot; every mutation writes through
    store = SqlStore.from_url(settings.database_url, echo=settings.db_echo)
    store.create_schema()
    catalog = load_catalog(settings)
    accounts = AccountLedger(catalog, store=store, accounts=store.load_accounts())
    readings = ReadingLedger(store.load_readings())

    app.state.settings = settings
    app.state.store = store
    app.state.catalog = catalog
    app.state.accounts = accounts
    app.state.readings = readings
    app.state.workflow = UploadWorkflow(accounts, readings, analyzer or VisionAnalyzer(settings))

    @app.middleware("http")
    async def request_context(request: Request, call_next):
        bind_request_context(str(uuid4()), request.method, request.url.path)
        return await call_next(request)

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.code, "message": exc.message},
        )

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.exception("unhandled_error", path=request.url.path)
        # never leak internals to the caller
        return JSONResponse(
            status_code=InternalFailure.status_code,
            content={"error": InternalFailure.code, "message": InternalFailure.message},
        )

    @app.get("/health")
    def health():
        return {"status" : "ok", "env" : settings.app_env}

    # Include authentication routes
    app.include_router(auth_router)
    # Include license / own account routes
    app.include_router(licenses_router)
    # Include glycemia reading routes
    app.include_router(readings_router)
    # Include admin routes
    app.include_router(admin_router)

    logger.info(
        "app_started",
        env=settings.app_env,
        accounts=len(accounts.list_all()),
        readings=len(readings),
    )
    return app

app = create_app()

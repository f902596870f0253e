import logging
from contextlib import asynccontextmanager
from typing import Any, Optional

from fastapi import Body, Depends, FastAPI, Header, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from catalog import CatalogService
from checkout import CHECKOUT_MESSAGE, CheckoutService
from config import Settings, configure_logging, get_settings
from database import COLLECTION_FILES, RecordStore
from errors import AuthError, ServiceError, StorageError
from schemas import LoginRequest, Order, Product, Session, SiteConfig
from seed import seed_store
from sessions import SessionAuthority
from site_config import SiteConfigService

logger = logging.getLogger(__name__)

# --------------------- Utility ---------------------

def bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    try:
        scheme, token = authorization.split()
    except ValueError:
        return None
    if scheme.lower() != "bearer":
        return None
    return token


def get_sessions(request: Request) -> SessionAuthority:
    return request.app.state.sessions


def get_catalog(request: Request) -> CatalogService:
    return request.app.state.catalog


def get_site(request: Request) -> SiteConfigService:
    return request.app.state.site


def get_checkout(request: Request) -> CheckoutService:
    return request.app.state.checkout


def get_current_session(
    authorization: Optional[str] = Header(None),
    sessions: SessionAuthority = Depends(get_sessions),
) -> Session:
    session = sessions.validate(bearer_token(authorization))
    if session is None:
        raise AuthError("Unauthorized, please log in again.")
    return session


def session_out(session: Session) -> dict:
    return {
        "email": session.identity.email,
        "issuedAt": session.issued_at.isoformat(),
    }

# --------------------- Error handlers ---------------------

async def service_error_handler(request: Request, exc: ServiceError):
    if isinstance(exc, StorageError):
        logger.error("Storage failure on %s %s: %s", request.method, request.url.path, exc.message, exc_info=exc)
        return JSONResponse(status_code=exc.status_code, content={"message": "Internal server error."})
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


async def unexpected_error_handler(request: Request, exc: Exception):
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"message": "Internal server error."})


async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"message": "Malformed request body."})


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    message = "Resource not found." if exc.status_code == 404 else str(exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"message": message}, headers=exc.headers)

# --------------------- App ---------------------

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    store = RecordStore(settings.DATA_DIR)
    catalog = CatalogService(store)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.SEED_DATA:
            await seed_store(store)
        logger.info("Serving data from %s, admin account %s", store.data_dir.resolve(), settings.ADMIN_EMAIL)
        yield

    app = FastAPI(title="Apex Store API", version="1.0.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store
    app.state.sessions = SessionAuthority.from_settings(settings)
    app.state.catalog = catalog
    app.state.site = SiteConfigService(store)
    app.state.checkout = CheckoutService(store, catalog)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)

    register_routes(app)
    return app

# --------------------- Routes ---------------------

def register_routes(app: FastAPI) -> None:

    @app.get("/")
    def root():
        return {"message": "Apex store API is running"}

    @app.get("/schema")
    def get_schema():
        return {
            "product": Product.model_json_schema(),
            "site": SiteConfig.model_json_schema(),
            "order": Order.model_json_schema(by_alias=True),
        }

    @app.get("/test")
    async def test_storage(request: Request):
        store: RecordStore = request.app.state.store
        response = {
            "backend": "✅ Running",
            "data_dir": str(store.data_dir),
            "collections": {},
        }
        for name in COLLECTION_FILES:
            if not store.exists(name):
                response["collections"][name] = "❌ Missing"
                continue
            try:
                await store.load(name)
                response["collections"][name] = "✅ OK"
            except StorageError as e:
                logger.warning("Collection check failed: %s", e.message)
                response["collections"][name] = "⚠️  Unreadable"
        return response

    # Auth
    @app.post("/api/auth/login")
    def login(req: LoginRequest, sessions: SessionAuthority = Depends(get_sessions)):
        session = sessions.login(req.email, req.password)
        return {"token": session.token, "session": session_out(session)}

    @app.post("/api/auth/logout")
    def logout(authorization: Optional[str] = Header(None), sessions: SessionAuthority = Depends(get_sessions)):
        sessions.logout(bearer_token(authorization))
        return {"message": "Logged out."}

    # Products
    @app.get("/api/products")
    async def list_products(catalog: CatalogService = Depends(get_catalog)):
        return {"items": await catalog.list()}

    @app.get("/api/products/{product_id}")
    async def get_product(product_id: str, catalog: CatalogService = Depends(get_catalog)):
        return await catalog.get(product_id)

    @app.post("/api/products", status_code=201)
    async def create_product(
        body: Any = Body(None),
        session: Session = Depends(get_current_session),
        catalog: CatalogService = Depends(get_catalog),
    ):
        return await catalog.create(body)

    @app.put("/api/products/{product_id}")
    async def update_product(
        product_id: str,
        body: Any = Body(None),
        session: Session = Depends(get_current_session),
        catalog: CatalogService = Depends(get_catalog),
    ):
        return await catalog.update(product_id, body)

    @app.delete("/api/products/{product_id}")
    async def delete_product(
        product_id: str,
        session: Session = Depends(get_current_session),
        catalog: CatalogService = Depends(get_catalog),
    ):
        return await catalog.delete(product_id)

    # Site
    @app.get("/api/site")
    async def get_site_config(site: SiteConfigService = Depends(get_site)):
        return await site.get()

    @app.put("/api/site")
    async def update_site_config(
        body: Any = Body(None),
        session: Session = Depends(get_current_session),
        site: SiteConfigService = Depends(get_site),
    ):
        return await site.update(body)

    # Checkout & orders
    @app.post("/api/checkout")
    async def checkout(body: Any = Body(None), service: CheckoutService = Depends(get_checkout)):
        if not isinstance(body, dict):
            body = {}
        order = await service.checkout(body.get("items"), body.get("customer"), body.get("payment"))
        return {"message": CHECKOUT_MESSAGE, "order": order}

    @app.get("/api/orders")
    async def list_orders(
        session: Session = Depends(get_current_session),
        service: CheckoutService = Depends(get_checkout),
    ):
        return {"items": await service.list_orders()}


app = create_app()


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)

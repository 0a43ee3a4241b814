"""
Printhaus Backend
FastAPI application entry point

- Rate limiting with SlowAPI
- Error sanitization middleware
- Security headers (CSP, X-Frame-Options, etc.)
- Request id / duration headers
- Health endpoint with DB ping
- Request size limits
"""
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from sqlalchemy import text
from starlette.responses import JSONResponse

from printhaus.api.routes import (
    admin,
    artists,
    auth,
    cart,
    categories,
    designs,
    orders,
    products,
    uploads,
)
from printhaus.core.config import settings
from printhaus.core.database import AsyncSessionLocal, create_tables, engine, get_db_session
from printhaus.core.error_handler import ErrorSanitizationMiddleware
from printhaus.core.exceptions import (
    PrinthausError,
    printhaus_error_handler,
    request_validation_error_handler,
)
from printhaus.core.rate_limit import limiter, rate_limit_exceeded_handler
from printhaus.core.request_context import RequestContextMiddleware, RequestSizeLimitMiddleware
from printhaus.core.security_headers import SecurityHeadersMiddleware
from printhaus.services.seed import seed_catalog
from printhaus.services.storage import StorageService

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup: upload directory, tables, starter catalog.
    Shutdown: dispose the connection pool.
    """
    StorageService().ensure_dir()
    await create_tables()

    if settings.SEED_ON_STARTUP:
        async with get_db_session() as db:
            await seed_catalog(db)
    else:
        logger.info("Catalog seeding DISABLED via config")

    logger.info(f"{settings.APP_NAME} started ({settings.ENVIRONMENT})")

    yield

    await engine.dispose()
    logger.info("Database engine disposed")


app = FastAPI(
    lifespan=lifespan,
    title=f"{settings.APP_NAME} API",
    description="""
## Printhaus Print-on-Demand API

Storefront for customizable products and artist-submitted designs.

### Features
- **Catalog**: Categories and customizable base products
- **Artists & Designs**: Artist onboarding and design uploads
- **Cart & Checkout**: Server-priced cart with transactional checkout
- **Admin**: Users, artists, catalog and order management

### Authentication
Use `/api/auth/login` to start a session. The session token is set as an
HttpOnly cookie for web clients and returned in the body for API clients.
Cookie-authenticated mutations must send the CSRF cookie value in `X-CSRF-Token`.
    """,
    version=settings.API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_tags=[
        {"name": "Health", "description": "Health check"},
        {"name": "Authentication", "description": "Signup, login and sessions"},
        {"name": "Categories", "description": "Product categories"},
        {"name": "Products", "description": "Customizable base products"},
        {"name": "Artists", "description": "Artist profiles"},
        {"name": "Designs", "description": "Artist designs"},
        {"name": "Cart", "description": "Shopping cart operations"},
        {"name": "Orders", "description": "Checkout and order history"},
        {"name": "Admin", "description": "Back office"},
        {"name": "Uploads", "description": "Stored image files"},
    ],
)

# Rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

# Domain errors keep their own status codes
app.add_exception_handler(PrinthausError, printhaus_error_handler)
app.add_exception_handler(RequestValidationError, request_validation_error_handler)

# Middleware: last added runs first
app.add_middleware(RequestSizeLimitMiddleware)
app.add_middleware(ErrorSanitizationMiddleware)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestContextMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID", "X-Request-Duration"],
)

# Routes
app.include_router(auth.router, prefix="/api/auth", tags=["Authentication"])
app.include_router(categories.router, prefix="/api/categories", tags=["Categories"])
app.include_router(products.router, prefix="/api/products", tags=["Products"])
app.include_router(artists.router, prefix="/api/artists", tags=["Artists"])
app.include_router(designs.router, prefix="/api/designs", tags=["Designs"])
app.include_router(cart.router, prefix="/api/cart", tags=["Cart"])
app.include_router(orders.router, prefix="/api/orders", tags=["Orders"])
app.include_router(admin.router, prefix="/api/admin", tags=["Admin"])
app.include_router(uploads.router, prefix="/uploads", tags=["Uploads"])


@app.get("/health", tags=["Health"])
async def health_check():
    """
    Health check with an actual DB ping.
    Returns 503 if the database is unreachable.
    """
    health_status = {
        "status": "healthy",
        "database": "unknown",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }

    try:
        async with AsyncSessionLocal() as db:
            await db.execute(text("SELECT 1"))
        health_status["database"] = "connected"
    except Exception as e:
        logger.error(f"Health check DB ping failed: {type(e).__name__}: {e}")
        health_status["database"] = f"error: {type(e).__name__}"
        health_status["status"] = "unhealthy"
        return JSONResponse(status_code=503, content=health_status)

    return health_status


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("printhaus.main:app", host="0.0.0.0", port=8000, reload=settings.DEBUG)

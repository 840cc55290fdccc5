"""
eCommerce Platform - Backend API
Multi-tenant REST API for products, carts, orders and tenant administration
"""
import logging
import time
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(env_path)

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.orm import Session

from ecomm.api import (
    admin_orders,
    api_keys,
    auth,
    cart,
    categories,
    files,
    markets,
    order_statuses,
    orders,
    products,
    tenants,
)
from ecomm.core.config import settings
from ecomm.core.database import SessionLocal, check_database_connection, get_db, init_db
from ecomm.core.exceptions import DomainError
from ecomm.services.seed_service import SeedService

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


class CachedStaticFiles(StaticFiles):
    """Static files with a long public cache lifetime"""

    async def get_response(self, path, scope):
        response = await super().get_response(path, scope)
        if response.status_code == 200:
            response.headers["Cache-Control"] = f"public,max-age={settings.UPLOAD_CACHE_SECONDS}"
        return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    Path(settings.UPLOADS_DIR).mkdir(parents=True, exist_ok=True)
    init_db()

    if settings.SEED_DATABASE:
        db = SessionLocal()
        try:
            SeedService(db).seed_if_empty()
        finally:
            db.close()

    logger.info(f"{settings.API_TITLE} {settings.API_VERSION} started")
    yield


# Create FastAPI application
app = FastAPI(
    title=settings.API_TITLE,
    version=settings.API_VERSION,
    description=settings.API_DESCRIPTION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_allowed_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
)


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


# Include API routers
app.include_router(auth.router, prefix="/api/v1/auth", tags=["Authentication"])
app.include_router(products.router, prefix="/api/v1/products", tags=["Products"])
app.include_router(categories.router, prefix="/api/v1/categories", tags=["Categories"])
app.include_router(cart.router, prefix="/api/v1/cart", tags=["Cart"])
app.include_router(orders.router, prefix="/api/v1/orders", tags=["Orders"])
app.include_router(files.router, prefix="/api/v1/files", tags=["Files"])
app.include_router(tenants.router, prefix="/api/v1/tenants", tags=["Tenants"])

# Admin (JWT only)
app.include_router(admin_orders.router, prefix="/api/v1/admin/orders", tags=["Admin"])
app.include_router(tenants.admin_router, prefix="/api/v1/admin/tenants", tags=["Admin"])
app.include_router(markets.router, prefix="/api/v1/admin/markets", tags=["Admin"])
app.include_router(order_statuses.router, prefix="/api/v1/order-statuses", tags=["Order Statuses"])
app.include_router(api_keys.router, prefix="/api/v1/markets/{market_id}/api-keys", tags=["API Keys"])

app.mount("/uploads", CachedStaticFiles(directory=settings.UPLOADS_DIR, check_dir=False), name="uploads")


@app.get("/")
def root():
    """Root endpoint - API status"""
    return {
        "message": settings.API_TITLE,
        "status": "online",
        "version": settings.API_VERSION,
    }


@app.get("/health")
def health(db: Session = Depends(get_db)):
    """Health check endpoint for monitoring - tests database connectivity"""
    start_time = time.time()

    db_status = "unknown"
    db_latency_ms = None
    db_error = None

    try:
        db_latency_ms = check_database_connection(max_retries=1, retry_delay=0.5, bind=db.get_bind())
        db_status = "connected"
    except Exception as e:
        db_status = "disconnected"
        db_error = str(e)

    total_latency_ms = round((time.time() - start_time) * 1000, 2)

    return {
        "status": "healthy" if db_status == "connected" else "degraded",
        "service": "ecomm-api",
        "version": settings.API_VERSION,
        "database": {
            "status": db_status,
            "latency_ms": db_latency_ms,
            "error": db_error,
        },
        "total_latency_ms": total_latency_ms,
    }


def run():
    """Console entry point: serve the API with uvicorn"""
    import uvicorn

    uvicorn.run("ecomm.main:app", host=settings.API_HOST, port=settings.API_PORT)


if __name__ == "__main__":
    run()

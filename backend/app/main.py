"""
Hybrid Catalog - Backend API
Product metadata in the catalog artifact, installable payloads in MongoDB
"""
import time
import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Load environment variables
env_path = Path(__file__).parent.parent / '.env'
load_dotenv(env_path)

from app.core.config import settings
from app.core.database import get_database_with_retry
from app.core.errors import CatalogError, PersistenceError
from app.api import products, orders, admin
from app.api.dependencies import get_blob_store, get_metadata_store

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="[%(asctime)s][%(levelname)s] %(name)s: %(message)s",
    datefmt="%H:%M:%S",
    stream=sys.stdout,
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the unique productId index before serving"""
    try:
        get_blob_store().ensure_indexes()
    except PersistenceError as e:
        logger.warning(f"Could not ensure productfiles index at startup: {e.message}")
    logger.info(f"📂 Metadata: {settings.CATALOG_FILE_PATH} | 📁 Binaries: MongoDB/{settings.PRODUCT_FILES_COLLECTION}")
    yield


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
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)


@app.exception_handler(CatalogError)
async def catalog_error_handler(request: Request, exc: CatalogError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.message, "error": exc.kind},
    )


# Include API routers
app.include_router(products.router, prefix="/api/products", tags=["Products"])
app.include_router(orders.router, prefix="/api/orders", tags=["Orders"])
app.include_router(admin.router, prefix="/api/admin", tags=["Admin"])


@app.get("/")
async def root():
    """Root endpoint - API status"""
    return {
        "message": "Hybrid Catalog API",
        "status": "online",
        "version": settings.API_VERSION,
    }


@app.get("/health")
def health():
    """Health check endpoint - tests MongoDB and the catalog artifact"""
    start_time = time.time()

    db_status = "unknown"
    db_latency_ms = None
    db_error = None

    try:
        db_start = time.time()
        get_database_with_retry(max_retries=1, retry_delay=0.5)
        db_latency_ms = round((time.time() - db_start) * 1000, 2)
        db_status = "connected"
    except Exception as e:
        db_status = "disconnected"
        db_error = str(e)

    catalog_status = "readable"
    catalog_error = None
    product_count = None
    try:
        product_count = len(get_metadata_store().read_all())
    except CatalogError as e:
        catalog_status = "unreadable"
        catalog_error = e.message

    healthy = db_status == "connected" and catalog_status == "readable"

    return {
        "status": "healthy" if healthy else "degraded",
        "service": "hybrid-catalog-api",
        "version": settings.API_VERSION,
        "database": {
            "status": db_status,
            "latency_ms": db_latency_ms,
            "error": db_error,
        },
        "catalog": {
            "status": catalog_status,
            "path": settings.CATALOG_FILE_PATH,
            "products": product_count,
            "error": catalog_error,
        },
        "total_latency_ms": round((time.time() - start_time) * 1000, 2),
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.API_HOST, port=settings.API_PORT)

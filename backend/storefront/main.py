"""
Storefront - Backend API
Catálogo de productos, pedidos y usuarios
"""
import logging
import time
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Load environment variables
env_path = Path(__file__).parent.parent / '.env'
load_dotenv(env_path)

from storefront.api import orders, products, users
from storefront.api.errors import RequestContextMiddleware, register_exception_handlers
from storefront.core.config import settings
from storefront.core.database import get_db_connection_with_retry

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """Build the FastAPI application with middleware, error handlers and routers"""
    app = FastAPI(
        title=settings.API_TITLE,
        version=settings.API_VERSION,
        description=settings.API_DESCRIPTION,
        debug=settings.API_DEBUG
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_allowed_origins(),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestContextMiddleware)
    register_exception_handlers(app)

    # Include API routers
    app.include_router(products.router, prefix="/api/v1/products", tags=["Products"])
    app.include_router(orders.router, prefix="/api/v1/orders", tags=["Orders"])
    app.include_router(users.router, prefix="/api/v1/users", tags=["Users"])

    @app.get("/")
    def root():
        """Endpoint raíz - Verificación de estado de la API"""
        return {
            "message": settings.API_TITLE,
            "status": "online",
            "version": settings.API_VERSION
        }

    @app.get("/health")
    def health():
        """Health check endpoint para monitoreo - tests database connectivity"""
        start_time = time.time()

        db_status = "unknown"
        db_latency_ms = None

        try:
            # Test database connection with minimal retry (fast check)
            conn = get_db_connection_with_retry(max_retries=1, retry_delay=0.5)
            try:
                cursor = conn.cursor()
                db_start = time.time()
                cursor.execute("SELECT 1")
                cursor.fetchone()
                db_latency_ms = round((time.time() - db_start) * 1000, 2)
                cursor.close()
            finally:
                conn.close()
            db_status = "connected"
        except Exception as e:
            logger.warning(f"Health check database probe failed: {e}")
            db_status = "disconnected"

        return {
            "status": "healthy" if db_status == "connected" else "degraded",
            "version": settings.API_VERSION,
            "database": {
                "status": db_status,
                "latency_ms": db_latency_ms
            },
            "total_latency_ms": round((time.time() - start_time) * 1000, 2)
        }

    logger.info(f"{settings.API_TITLE} {settings.API_VERSION} ready")
    return app


app = create_app()

# products_api/main.py

"""
FastAPI Products API.
Manages products (name, price, availability) with request validation,
Swagger documentation, a trusted-origin CORS policy and request logging.
"""
import logging
import os
import sys

from fastapi import FastAPI, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.docs import get_swagger_ui_html

from .db import DatabaseUnavailableError, connect_db
from .errors import register_exception_handlers
from .middleware import log_requests, trusted_origin_middleware
from .router import router

# -----------------------------
# Configure Logging
# -----------------------------
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)

# Suppress noisy logs from third-party libraries; requests are logged by our middleware
logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
logging.getLogger("uvicorn.error").setLevel(logging.INFO)

# Load environment variables
FRONTEND_URL = os.getenv("FRONTEND_URL")

if FRONTEND_URL:
    logger.info(f"Products API: trusted frontend origin is {FRONTEND_URL}")
else:
    logger.info("Products API: FRONTEND_URL **NOT SET**, browser origins will be rejected")


# -----------------------------
# FastAPI App Initialization
# -----------------------------
app = FastAPI(
    title="Rest API Documentation",
    description="API docs for products",
    version="1.0.0",
    openapi_tags=[
        {"name": "Products", "description": "API operations related to products"},
    ],
    docs_url=None,
    redoc_url=None,
)

register_exception_handlers(app)

# Middleware added last runs first: the origin check, then CORS, then logging.
# Untrusted preflights are rejected before CORSMiddleware can answer them.
app.middleware("http")(log_requests)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[FRONTEND_URL] if FRONTEND_URL else [],
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    allow_headers=["*"],
)
app.middleware("http")(trusted_origin_middleware(FRONTEND_URL))

app.include_router(router)


# --- FastAPI Event Handlers ---
@app.on_event("startup")
def startup_event():
    """
    Handles application startup events.
    Ensures the database is reachable and tables exist, retrying with backoff.
    Exits the process when the database stays unreachable and DB_FAIL_FAST is set.
    """
    try:
        connect_db()
    except DatabaseUnavailableError:
        sys.exit(1)
    except Exception as e:
        logger.critical(
            f"An unexpected error occurred during database startup: {e}",
            exc_info=True,
        )
        sys.exit(1)


# --- Documentation ---
@app.get("/docs", include_in_schema=False)
async def swagger_ui():
    return get_swagger_ui_html(
        openapi_url=app.openapi_url,
        title="Documentation Rest API",
    )


# --- Health Check Endpoint ---
@app.get("/health", status_code=status.HTTP_200_OK, summary="Health check endpoint")
async def health_check():
    """
    A simple health check endpoint to verify the service is running.
    Returns 200 OK if the service is alive.
    """
    return {"status": "ok", "service": "products-api"}

# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the Gisabo API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.exceptions import GisaboException, gisabo_exception_handler
from app.routers import (
    account,
    admin,
    catalog,
    chat,
    exchange_rates,
    health,
    orders,
    payments,
    transfers,
)
from app.auth import routes as auth_routes
from lib.database import init_db

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Runs on startup and shutdown:
    - Startup: Create missing tables, log config
    - Shutdown: Log
    """
    # Startup
    logger.info(f"Starting Gisabo API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")
    init_db()

    if not settings.SQUARE_ACCESS_TOKEN:
        logger.warning("SQUARE_ACCESS_TOKEN is not set: payments will fail")
    if not settings.OPENAI_API_KEY:
        logger.warning("OPENAI_API_KEY is not set: the chat assistant is disabled")

    yield

    # Shutdown
    logger.info("Shutting down Gisabo API")


# Create FastAPI application
app = FastAPI(
    title="Gisabo API",
    description="""
## Money Transfer & Marketplace API

Gisabo lets the African diaspora send money home and buy from an African
marketplace.

### Key Features

- **Transfers**: Server-side quotes at admin-maintained exchange rates, card payment via Square
- **Marketplace**: Cart checkout with idempotent order creation and price-floor checks
- **Accounts**: Registration, login, profile and password management
- **Assistant**: A support chatbot
- **Admin Panel**: Exchange rates, products and services maintenance

### Quick Start

```bash
# 1. Register
curl -X POST http://localhost:8000/api/auth/register \\
  -H "Content-Type: application/json" \\
  -d '{"username": "jean", "email": "jean@example.com", "password": "secret1", "firstName": "Jean", "lastName": "N."}'

# 2. Quote a transfer
curl "http://localhost:8000/api/transfers/quote?amount=100&from=CAD&to=BIF"
```
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "Auth", "description": "Registration, login and token checks"},
        {"name": "Account", "description": "Profile and password management"},
        {"name": "Catalog", "description": "Categories, products and services"},
        {"name": "Exchange Rates", "description": "Public exchange rate lookup"},
        {"name": "Transfers", "description": "Money transfer quotes, creation and payment"},
        {"name": "Orders", "description": "Marketplace checkout and order payment"},
        {"name": "Payments", "description": "Client-side payment configuration"},
        {"name": "Chat", "description": "Support assistant"},
        {"name": "Admin", "description": "Admin panel (admin token required)"},
        {"name": "Health", "description": "API health and liveness checks"},
    ],
)


# =============================================================================
# Middleware
# =============================================================================

# CORS middleware - allows cross-origin requests
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(GisaboException)
async def handle_gisabo_exception(request: Request, exc: GisaboException):
    """Handle custom Gisabo exceptions."""
    return await gisabo_exception_handler(request, exc)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

# Health check endpoints (both /health and /api/health)
app.include_router(health.router, tags=["Health"])
app.include_router(health.router, prefix="/api", tags=["Health"])

# Authentication endpoints
app.include_router(
    auth_routes.router,
    prefix="/api",
    tags=["Auth"]
)

# Profile / password endpoints
app.include_router(
    account.router,
    prefix="/api",
    tags=["Account"]
)

# Catalog endpoints
app.include_router(
    catalog.router,
    prefix="/api",
    tags=["Catalog"]
)

# Exchange rate lookup
app.include_router(
    exchange_rates.router,
    prefix="/api",
    tags=["Exchange Rates"]
)

# Transfer endpoints
app.include_router(
    transfers.router,
    prefix="/api/transfers",
    tags=["Transfers"]
)

# Order endpoints
app.include_router(
    orders.router,
    prefix="/api/orders",
    tags=["Orders"]
)

# Square client configuration
app.include_router(
    payments.router,
    prefix="/api",
    tags=["Payments"]
)

# Chat assistant endpoints
app.include_router(
    chat.router,
    prefix="/api/chat",
    tags=["Chat"]
)

# Admin panel endpoints
app.include_router(
    admin.router,
    prefix="/api/admin",
    tags=["Admin"]
)
app.include_router(
    admin.bootstrap_router,
    prefix="/api",
    tags=["Admin"]
)


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "Gisabo API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/api/health",
    }

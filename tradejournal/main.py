"""
FastAPI main application.

Entry point for the trading journal backend: calculators, currency rates,
fund transfers and portfolio analytics.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tradejournal.config import settings
from tradejournal.config.database import (
    close_mongodb_connection,
    connect_to_mongodb,
    get_database,
)
from tradejournal.integrations.exchange_rates import get_exchange_rate_client
from tradejournal.modules.analytics.router import router as analytics_router
from tradejournal.modules.calculator.router import router as calculator_router
from tradejournal.modules.currency.router import router as currency_router
from tradejournal.modules.currency.service import ExchangeRateCache
from tradejournal.modules.transfers.router import router as transfers_router
from tradejournal.repositories.currency_rate_repository import CurrencyRateRepository
from tradejournal.utils.locks import KeyedLock
from tradejournal.utils.logger import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Connects MongoDB and builds the process-wide rate cache and account locks
    on ``app.state``.
    """
    logger.info("Starting application...")

    try:
        await connect_to_mongodb()

        rate_client = get_exchange_rate_client()
        app.state.rate_client = rate_client
        app.state.rate_cache = ExchangeRateCache(
            rate_repository=CurrencyRateRepository(get_database()),
            provider=rate_client
        )
        app.state.account_locks = KeyedLock()

        logger.info("Application started successfully")
    except Exception as e:
        logger.error(f"Failed to start application: {str(e)}")
        raise

    yield

    logger.info("Shutting down application...")

    try:
        await app.state.rate_client.close()
        await close_mongodb_connection()
        logger.info("Application shut down successfully")
    except Exception as e:
        logger.error(f"Error during shutdown: {str(e)}")


API_DESCRIPTION = """
## Trading Journal API

Trade calculators, exchange rates, fund transfers between accounts and
portfolio analytics.

### Authentication

Transfer and analytics endpoints require a JWT access token issued by the
auth service: `Authorization: Bearer <token>`. Calculator and currency
endpoints are public.

### Response Format

```json
{
  "status_code": 200,
  "message": "Operation successful",
  "data": { ... },
  "error": null
}
```

Errors carry `data: null` and `error: {"code": "...", "message": "..."}`.
"""

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description=API_DESCRIPTION,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(calculator_router, prefix="/api/v1")
app.include_router(currency_router, prefix="/api/v1")
app.include_router(transfers_router, prefix="/api/v1")
app.include_router(analytics_router, prefix="/api/v1")


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "running"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "tradejournal.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG
    )

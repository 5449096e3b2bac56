"""
FastAPI main application for the investment ledger.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ledger.core.models.portfolio import Portfolio

from .routers import backup, portfolio, strategies

API_VERSION = "1.0.0"


def create_app(portfolio_instance: Portfolio | None = None) -> FastAPI:
    """Build the API; without a portfolio one is opened from the data file on first request."""
    application = FastAPI(
        title="Investment Ledger API",
        version=API_VERSION,
        description="API for portfolio accounting, dividend and projection reports",
    )
    application.state.portfolio = portfolio_instance

    # Local frontends only
    application.add_middleware(
        CORSMiddleware,
        allow_origins=[
            "http://localhost:3000",
            "http://localhost:5173",
            "http://localhost:8080",
        ],
        allow_credentials=False,
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type", "Accept", "Origin"],
    )

    application.include_router(portfolio.router, prefix="/api", tags=["portfolio"])
    application.include_router(strategies.router, prefix="/api/strategies", tags=["strategies"])
    application.include_router(backup.router, prefix="/api", tags=["backup"])

    @application.get("/")
    async def root() -> dict[str, str]:
        """Root endpoint returning API information."""
        return {"message": "Investment Ledger API", "version": API_VERSION, "status": "running"}

    @application.get("/health")
    async def health() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy"}

    return application


app = create_app()

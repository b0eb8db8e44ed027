"""
Microloans API Application Factory
"""

from fastapi import FastAPI
import uvicorn

from .borrowers import router as borrowers_router
from .loans import router as loans_router
from .portfolio import router as portfolio_router
from .. import __version__
from ..config import get_config
from ..logging_config import setup_logging


def create_app() -> FastAPI:
    """Create and configure the FastAPI application"""
    app = FastAPI(
        title="Microloans Ledger API",
        description="Community micro-loan ledger: borrowers, loans, repayments and portfolio totals",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc"
    )

    app.include_router(borrowers_router, prefix="/borrowers", tags=["Borrowers"])
    app.include_router(loans_router, prefix="/loans", tags=["Loans"])
    app.include_router(portfolio_router, prefix="/portfolio", tags=["Portfolio"])

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {
            "status": "healthy",
            "service": "microloans_api",
            "version": __version__
        }

    @app.get("/")
    async def get_api_info():
        """Get API information"""
        return {
            "name": "Microloans Ledger API",
            "version": __version__,
            "endpoints": {
                "docs": "/docs",
                "health": "/health",
                "borrowers": "/borrowers",
                "loans": "/loans",
                "portfolio": "/portfolio",
            }
        }

    return app


def run_server(host: str = None, port: int = None, debug: bool = False):
    """Run the FastAPI server with configured logging"""
    config = get_config()
    setup_logging(level=config.log_level, fmt=config.log_format)
    uvicorn.run(
        "microloans.api:app",
        host=host or config.api_host,
        port=port or config.api_port,
        reload=debug,
        log_level=config.log_level.lower()
    )


app = create_app()

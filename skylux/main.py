import logging
import sys
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from skylux.config import settings
from skylux.dependencies import ServiceRegistry, create_registry
from skylux.exceptions import SkyluxError
from skylux.catalog.router import router as flights_router
from skylux.seats.router import router as seats_router
from skylux.fares.router import router as fares_router
from skylux.promotions.router import router as promotions_router, gift_card_router
from skylux.bookings.router import router as bookings_router

logger = logging.getLogger(__name__)

def configure_logging(level: Optional[str] = None):
    logging.basicConfig(
        level=getattr(logging, (level or settings.LOG_LEVEL).upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)]
    )

def create_app(registry: Optional[ServiceRegistry] = None) -> FastAPI:
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version="1.0.0",
        description="SkyLux Airlines booking API",
        docs_url="/docs",
        redoc_url="/redoc"
    )

    app.state.registry = registry or create_registry()

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(SkyluxError)
    async def handle_skylux_error(request: Request, exc: SkyluxError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    # Include routers
    app.include_router(
        flights_router,
        prefix=f"{settings.API_V1_STR}/flights",
        tags=["Flights"]
    )

    app.include_router(
        seats_router,
        prefix=f"{settings.API_V1_STR}/seats",
        tags=["Seats"]
    )

    app.include_router(
        fares_router,
        prefix=f"{settings.API_V1_STR}/fares",
        tags=["Fares"]
    )

    app.include_router(
        promotions_router,
        prefix=f"{settings.API_V1_STR}/promotions",
        tags=["Promotions"]
    )

    app.include_router(
        gift_card_router,
        prefix=f"{settings.API_V1_STR}/gift-cards",
        tags=["Gift Cards"]
    )

    app.include_router(
        bookings_router,
        prefix=f"{settings.API_V1_STR}/bookings",
        tags=["Bookings"]
    )

    @app.get("/")
    def root():
        """Root endpoint"""
        return {
            "message": "SkyLux Airlines Booking API",
            "version": "1.0.0",
            "docs": "/docs"
        }

    @app.get("/health")
    def health_check():
        """Health check endpoint"""
        return {"status": "healthy", "flights": len(app.state.registry.catalog)}

    return app

configure_logging()
app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)

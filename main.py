import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import uvicorn

from app.core.config import settings
from app.core.database import connect_db, disconnect_db
from app.core.logging_config import setup_logging
from app.exceptions import AppException, Internal
from app.routes import cart, orders, tables

logger = logging.getLogger(__name__)


# Create FastAPI app
app = FastAPI(
    title="Akounamatata Ordering API",
    description="Table QR sessions, carts and kitchen orders",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AppException)
async def app_exception_handler(request: Request, exc: AppException):
    """Domain errors carry their own status code and user-facing message."""
    if isinstance(exc, Internal):
        logger.error("%s %s failed: %r", request.method, request.url.path, exc)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"detail": "Données invalides", "errors": jsonable_encoder(exc.errors())}
    )


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler for better error responses."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={
            "detail": "Erreur interne du serveur",
            "message": str(exc) if settings.ENVIRONMENT == "development" else "Something went wrong"
        }
    )


# Startup and shutdown events
@app.on_event("startup")
async def startup_event():
    """Configure logging and open the database connection."""
    setup_logging()
    try:
        await connect_db()
        logger.info("Database connected successfully")
    except Exception:
        logger.exception("Failed to connect to database")
        raise


@app.on_event("shutdown")
async def shutdown_event():
    """Close database connection on shutdown."""
    try:
        await disconnect_db()
        logger.info("Database disconnected successfully")
    except Exception:
        logger.exception("Error disconnecting from database")


# Include routers
app.include_router(cart.router, prefix="/api")
app.include_router(orders.router, prefix="/api")
app.include_router(tables.router, prefix="/api")


# Health check endpoint
@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "message": "Akounamatata API is running",
        "version": "1.0.0"
    }


# Root endpoint
@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "message": "Welcome to the Akounamatata Ordering API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health"
    }


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )

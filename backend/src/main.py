# main.py
# Entry point for the one-pager backend service.
# - Initializes FastAPI app and logging
# - Registers API routes (one-pager generation)
# - Provides root health-check endpoint
# - Run with: uvicorn backend.src.main:app --reload
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.onepager_routes import router as onepager_router
from .config.settings import get_settings

logging.basicConfig(
    level=get_settings().log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="OnePager Backend API",
    description="Generates employee one-pager presentations from a template",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Update this with your frontend URL in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition"],
)


@app.get("/")
def root():
    return {"status": "healthy", "message": "Backend API is running"}


@app.get("/health")
def health_check():
    return {"status": "ok"}


# Register API routes
app.include_router(onepager_router)

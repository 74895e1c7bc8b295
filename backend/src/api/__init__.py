# API routes module
# Contains all API endpoint definitions

from .onepager_routes import router as onepager_router

__all__ = ["onepager_router"]

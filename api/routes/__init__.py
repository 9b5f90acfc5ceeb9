"""
Route modules. Import and include in main app.
"""

from api.routes.auth import router as auth_router
from api.routes.health import router as health_router
from api.routes.settings import router as settings_router

__all__ = ["auth_router", "health_router", "settings_router"]

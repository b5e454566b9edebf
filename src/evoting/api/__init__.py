"""API routers."""

from .auth import router as auth_router
from .verification import router as verification_router
from .admin_recovery import router as admin_recovery_router
from .users import router as users_router

__all__ = [
    "auth_router",
    "verification_router",
    "admin_recovery_router",
    "users_router",
]

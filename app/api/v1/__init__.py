"""
API v1 Router
"""

from fastapi import APIRouter

from app.api.v1 import admin, categories, comments, notifications, posts, users

router = APIRouter()

# Include all endpoint routers
router.include_router(posts.router)
router.include_router(comments.router)
router.include_router(notifications.router)
router.include_router(categories.router)
router.include_router(users.router)
router.include_router(admin.router)

__all__ = ["router"]

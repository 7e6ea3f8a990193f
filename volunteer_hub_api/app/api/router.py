"""
Top‑level router.

The web client calls routes both at the root (``/posts``) and under the
``/api`` prefix (``/api/posts``), so each endpoint module declares full
paths itself and the routers are included without a prefix.
"""

from fastapi import APIRouter

from .endpoints import health, posts, users, volunteers

router = APIRouter()

router.include_router(health.router, tags=["health"])
router.include_router(users.router, tags=["users"])
router.include_router(posts.router, tags=["posts"])
router.include_router(volunteers.router, tags=["volunteers"])

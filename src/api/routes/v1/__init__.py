from __future__ import annotations

from fastapi import APIRouter

from api.post_controller import posts_router
from api.post_type_controller import post_types_router
from api.taxonomy_controller import categories_router, media_router

# Aggregate all domain routers under a single versioned router
router = APIRouter(prefix="/api/v1")
router.include_router(post_types_router)
router.include_router(posts_router)
router.include_router(categories_router)
router.include_router(media_router)

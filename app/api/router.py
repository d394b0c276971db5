from fastapi import APIRouter
from api.routes.feed import router as feed_router
from api.v1.router import router as v1_router

api_router = APIRouter()

api_router.include_router(feed_router)
api_router.include_router(v1_router, prefix="/api/v1")

from fastapi import APIRouter
from api.v1.routes.catalog import router as catalog_router
from api.v1.routes.logs import router as logs_router
from api.v1.routes.notifications import router as notifications_router
from api.v1.routes.users import router as users_router


# Main v1 router (includes all endpoints)
router = APIRouter()
router.include_router(notifications_router)
router.include_router(logs_router)
router.include_router(catalog_router)
router.include_router(users_router)

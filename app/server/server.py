from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.router import api_router
from api.dependencies.errors import setup_error_handlers
from api.dependencies.rate_limits import setup_rate_limiter
from infrastructure.services import get_settings
from server.lifespan import lifespan
from server.middleware import RequestContextMiddleware

settings = get_settings()


handler = FastAPI(title="notify-dispatch", lifespan=lifespan)
setup_rate_limiter(handler)
setup_error_handlers(handler)


allow_origins = ["*"] if settings.is_production else settings.server.CORS_ALLOW_ORIGINS
handler.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
handler.add_middleware(RequestContextMiddleware)


handler.include_router(api_router)

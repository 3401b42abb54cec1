import logging
from fastapi import FastAPI
from fastapi.responses import PlainTextResponse
import uvicorn
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from core.config import DEFAULT_JWT_SECRET, settings
from core.errors import register_error_handlers
from core.logging import setup_logging
from db.database import create_db_and_tables
from routers.auth import router as auth_router
from routers.locations import router as locations_router
from routers.ingredients import router as ingredients_router
from routers.menu_items import router as menu_items_router
from routers.mix_mappings import router as mix_mappings_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.log_level)
    if settings.jwt_secret == DEFAULT_JWT_SECRET:
        logger.warning("JWT_SECRET is not set; using the development default")
    await create_db_and_tables()
    yield


app = FastAPI(
    title="Restaurant Inventory API",
    description="API for managing restaurant locations, ingredients, menu items and recipes",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

app.include_router(auth_router, prefix="/api/auth", tags=["auth"])
app.include_router(locations_router, prefix="/api/locations", tags=["locations"])
app.include_router(ingredients_router, prefix="/api/ingredients", tags=["ingredients"])
app.include_router(menu_items_router, prefix="/api/menu-items", tags=["menu-items"])
app.include_router(mix_mappings_router, prefix="/api/mix-mappings", tags=["mix-mappings"])


@app.get("/", response_class=PlainTextResponse, include_in_schema=False)
async def root():
    return "Restaurant inventory API"


if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=settings.port, reload=True)

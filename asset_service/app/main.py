import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shared.core.config import settings
from shared.core.database import asset_engine, Base
from shared.exception_handler import setup_exception_handlers

from .models import orgs, locations, asset_templates, assets, work_orders, audit_logs
from .crud.asset_hierarchy.errors import AssetServiceError
from .router import assets_router, asset_templates_router, locations_router

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

app = FastAPI(title="Asset Service API")

# Create all tables
Base.metadata.create_all(bind=asset_engine)

# Allow requests from your React app
origins = [
    "http://localhost:8080",
    "http://127.0.0.1:8003"
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

setup_exception_handlers(app, service_errors=(AssetServiceError,))

# Include routers
app.include_router(locations_router.router)
app.include_router(asset_templates_router.router)
app.include_router(assets_router.router)

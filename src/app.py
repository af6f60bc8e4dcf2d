"""Storefront FastAPI application.

Commands are processed synchronously inside each request; the middleware in
``storefront.api.application`` pushes the domain context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV selects the configuration overlay from domain.toml:
#   - unset / "test" -> in-memory repositories
#   - "production"   -> PostgreSQL (DATABASE_URL)
from storefront.api import create_app
from storefront.config import get_settings
from storefront.domain import logger, storefront
from storefront.utils.db import setup_db

storefront.init()

app = create_app(storefront)


@app.on_event("startup")
async def prepare_schema():
    if get_settings().is_production:
        setup_db(storefront)
    logger.info("storefront_started", environment=get_settings().environment)

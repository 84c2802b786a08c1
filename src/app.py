"""Storefront FastAPI application.

Initializes the storefront domain, builds collaborators from settings and
serves the API. Commands are processed synchronously within each request.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

from storefront.api import create_app
from storefront.config import get_settings
from storefront.domain import storefront
from storefront.services import build_services
from storefront.utils.logging import configure_logging

# PROTEAN_ENV selects the config overlay in domain.toml:
#   - unset / "test" → in-memory providers, sync event processing
#   - "production"   → PostgreSQL, async event processing
configure_logging()
storefront.init()

app = create_app(build_services(get_settings()))

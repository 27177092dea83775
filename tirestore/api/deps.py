"""FastAPI dependency injection."""

from typing import Annotated

from fastapi import Depends, Header
from slowapi import Limiter
from slowapi.util import get_remote_address

from tirestore.config import Settings, get_settings
from tirestore.core.enums import StorageBackend
from tirestore.core.errors import Unauthorized
from tirestore.core.logging import logger
from tirestore.db.base import GarageStore
from tirestore.db.memory import MemoryStore
from tirestore.db.supabase_store import SupabaseStore
from tirestore.services.catalog import CatalogLookup
from tirestore.services.garage import GarageService

# Rate limiter
limiter = Limiter(key_func=get_remote_address)

# Service singletons
_catalog: CatalogLookup | None = None
_garage_service: GarageService | None = None


def build_store(settings: Settings) -> GarageStore:
    if settings.storage_backend is StorageBackend.SUPABASE:
        return SupabaseStore(url=settings.supabase_url, key=settings.supabase_key)
    return MemoryStore()


def get_catalog() -> CatalogLookup:
    """Get or create the catalog lookup client."""
    global _catalog
    if _catalog is None:
        _catalog = CatalogLookup()
    return _catalog


def get_garage_service() -> GarageService:
    """Get or create the garage service instance."""
    global _garage_service
    if _garage_service is None:
        settings = get_settings()
        _garage_service = GarageService(build_store(settings), get_catalog())
        logger.info(f"Garage service using {settings.storage_backend.value} storage")
    return _garage_service


async def close_services() -> None:
    global _catalog, _garage_service
    if _catalog is not None:
        await _catalog.close()
    _catalog = None
    _garage_service = None


async def get_current_owner(
    settings: Annotated[Settings, Depends(get_settings)],
    authorization: Annotated[str | None, Header()] = None,
) -> str:
    """Resolve the bearer token to an owner id."""
    if not authorization:
        raise Unauthorized("Missing Authorization header.")

    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise Unauthorized("Expected a bearer token.")

    owner = settings.token_owners.get(token.strip())
    if owner is None:
        logger.warning("Rejected unknown bearer token")
        raise Unauthorized("Unauthorized.")
    return owner


Owner = Annotated[str, Depends(get_current_owner)]
Garage = Annotated[GarageService, Depends(get_garage_service)]

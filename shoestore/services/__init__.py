"""비즈니스 로직 서비스."""

from shoestore.services.auth_service import AuthService
from shoestore.services.catalog_service import CatalogService
from shoestore.services.mutation_service import MutationService

__all__ = ["AuthService", "CatalogService", "MutationService"]

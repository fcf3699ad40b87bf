from shoestore.client.cache import CatalogCache
from shoestore.client.state import (
    AdminEditForm,
    DetailClosed,
    DetailOpen,
    ListingView,
    LocalState,
    Notice,
    NoticeKind,
    ReconcileResult,
    close_detail,
    filter_products,
    open_detail,
    reconcile,
    select_size,
)
from shoestore.client.sync import (
    CatalogSyncClient,
    CatalogUnavailableError,
    retry_with_backoff,
)

__all__ = [
    "CatalogCache",
    "AdminEditForm",
    "DetailClosed",
    "DetailOpen",
    "ListingView",
    "LocalState",
    "Notice",
    "NoticeKind",
    "ReconcileResult",
    "close_detail",
    "filter_products",
    "open_detail",
    "reconcile",
    "select_size",
    "CatalogSyncClient",
    "CatalogUnavailableError",
    "retry_with_backoff",
]

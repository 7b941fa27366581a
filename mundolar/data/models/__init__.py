from .data_filters import (
    BrandFilters,
    CatalogFilters,
    CategoryFilters,
    SortKey,
)

from .products import ProductResponse
from .categories import CategoryResponse
from .brands import BrandResponse
from .profiles import Notification, NotificationType, Profile
from .list_response import (
    CatalogPage,
    PriceBounds,
)

__all__ = [
    # Filter classes
    "BrandFilters",
    "CatalogFilters",
    "CategoryFilters",
    "SortKey",
    # Response models
    "ProductResponse",
    "CategoryResponse",
    "BrandResponse",
    "Profile",
    "Notification",
    "NotificationType",
    # List response models
    "CatalogPage",
    "PriceBounds",
]

"""Static catalog definitions for subscription products."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple


class SubscriptionTier(str, Enum):
    """Paid tiers a product can unlock."""

    PRO = "pro"
    PREMIUM = "premium"


class ProductFeature(str, Enum):
    """Feature keys advertised for subscription products."""

    ALL_CONTENT = "all_content"
    NO_ADS = "no_ads"
    OFFLINE_ACCESS = "offline_access"
    PRIORITY_SUPPORT = "priority_support"
    EARLY_ACCESS = "early_access"
    ADVANCED_ANALYTICS = "advanced_analytics"


@dataclass(frozen=True)
class ProductDefinition:
    """Describes a storefront product and the tier it grants."""

    product_id: str
    display_name: str
    tier: SubscriptionTier
    is_yearly: bool
    features: Tuple[ProductFeature, ...]
    sort_order: int
    is_best_value: bool = False

    def has_feature(self, feature: ProductFeature) -> bool:
        return feature in self.features


PRO_FEATURES: Tuple[ProductFeature, ...] = (
    ProductFeature.ALL_CONTENT,
    ProductFeature.NO_ADS,
    ProductFeature.OFFLINE_ACCESS,
)

PREMIUM_FEATURES: Tuple[ProductFeature, ...] = PRO_FEATURES + (
    ProductFeature.PRIORITY_SUPPORT,
    ProductFeature.EARLY_ACCESS,
    ProductFeature.ADVANCED_ANALYTICS,
)

PRO_MONTHLY_ID = "com.swiftquantumlearning.pro.monthly"
PRO_YEARLY_ID = "com.swiftquantumlearning.pro.yearly"
PREMIUM_MONTHLY_ID = "com.swiftquantumlearning.premium.monthly"
PREMIUM_YEARLY_ID = "com.swiftquantumlearning.premium.yearly"

PRODUCT_CATALOG: Dict[str, ProductDefinition] = {
    PRO_MONTHLY_ID: ProductDefinition(
        product_id=PRO_MONTHLY_ID,
        display_name="Pro (Monthly)",
        tier=SubscriptionTier.PRO,
        is_yearly=False,
        features=PRO_FEATURES,
        sort_order=1,
    ),
    PRO_YEARLY_ID: ProductDefinition(
        product_id=PRO_YEARLY_ID,
        display_name="Pro (Yearly)",
        tier=SubscriptionTier.PRO,
        is_yearly=True,
        features=PRO_FEATURES,
        sort_order=2,
    ),
    PREMIUM_MONTHLY_ID: ProductDefinition(
        product_id=PREMIUM_MONTHLY_ID,
        display_name="Premium (Monthly)",
        tier=SubscriptionTier.PREMIUM,
        is_yearly=False,
        features=PREMIUM_FEATURES,
        sort_order=3,
    ),
    PREMIUM_YEARLY_ID: ProductDefinition(
        product_id=PREMIUM_YEARLY_ID,
        display_name="Premium (Yearly)",
        tier=SubscriptionTier.PREMIUM,
        is_yearly=True,
        features=PREMIUM_FEATURES,
        sort_order=4,
        is_best_value=True,
    ),
}


def get_product_definition(product_id: str) -> ProductDefinition:
    """Return a product definition, raising if unsupported."""

    try:
        return PRODUCT_CATALOG[product_id]
    except KeyError as exc:
        raise KeyError(f"Unknown product id: {product_id}") from exc


def find_product_definition(product_id: Optional[str]) -> Optional[ProductDefinition]:
    if not product_id:
        return None
    return PRODUCT_CATALOG.get(product_id)


def sorted_products() -> Tuple[ProductDefinition, ...]:
    return tuple(sorted(PRODUCT_CATALOG.values(), key=lambda product: product.sort_order))

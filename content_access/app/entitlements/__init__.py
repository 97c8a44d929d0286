"""Entitlement domain models and the local subscription store."""

from .catalog import (
    PREMIUM_MONTHLY_ID,
    PREMIUM_YEARLY_ID,
    PRODUCT_CATALOG,
    PRO_MONTHLY_ID,
    PRO_YEARLY_ID,
    ProductDefinition,
    ProductFeature,
    SubscriptionTier,
    find_product_definition,
    get_product_definition,
    sorted_products,
)
from .errors import SerializationError
from .models import (
    FREE_SUBSCRIPTION,
    StoreOutcome,
    StoreResult,
    SubscriptionRecord,
    SubscriptionStatus,
    decode_record,
    encode_record,
)
from .store import (
    FREE_TRIAL_USED_KEY,
    LAST_VERIFICATION_KEY,
    SUBSCRIPTION_INFO_KEY,
    EntitlementStore,
)

__all__ = [
    "PREMIUM_MONTHLY_ID",
    "PREMIUM_YEARLY_ID",
    "PRODUCT_CATALOG",
    "PRO_MONTHLY_ID",
    "PRO_YEARLY_ID",
    "ProductDefinition",
    "ProductFeature",
    "SubscriptionTier",
    "find_product_definition",
    "get_product_definition",
    "sorted_products",
    "SerializationError",
    "FREE_SUBSCRIPTION",
    "StoreOutcome",
    "StoreResult",
    "SubscriptionRecord",
    "SubscriptionStatus",
    "decode_record",
    "encode_record",
    "FREE_TRIAL_USED_KEY",
    "LAST_VERIFICATION_KEY",
    "SUBSCRIPTION_INFO_KEY",
    "EntitlementStore",
]

from __future__ import annotations

import pytest

from content_access.app.entitlements import (
    PREMIUM_MONTHLY_ID,
    PREMIUM_YEARLY_ID,
    PRO_MONTHLY_ID,
    PRO_YEARLY_ID,
    ProductFeature,
    SubscriptionTier,
    find_product_definition,
    get_product_definition,
    sorted_products,
)


def test_products_sorted_by_display_order():
    assert [product.product_id for product in sorted_products()] == [
        PRO_MONTHLY_ID,
        PRO_YEARLY_ID,
        PREMIUM_MONTHLY_ID,
        PREMIUM_YEARLY_ID,
    ]


def test_premium_yearly_is_the_only_best_value():
    best = [product.product_id for product in sorted_products() if product.is_best_value]

    assert best == [PREMIUM_YEARLY_ID]


@pytest.mark.parametrize(
    ("product_id", "tier", "yearly"),
    [
        (PRO_MONTHLY_ID, SubscriptionTier.PRO, False),
        (PRO_YEARLY_ID, SubscriptionTier.PRO, True),
        (PREMIUM_MONTHLY_ID, SubscriptionTier.PREMIUM, False),
        (PREMIUM_YEARLY_ID, SubscriptionTier.PREMIUM, True),
    ],
)
def test_product_tiers(product_id, tier, yearly):
    product = get_product_definition(product_id)

    assert product.tier is tier
    assert product.is_yearly is yearly


def test_premium_features_extend_pro():
    pro = get_product_definition(PRO_MONTHLY_ID)
    premium = get_product_definition(PREMIUM_MONTHLY_ID)

    assert set(pro.features) < set(premium.features)
    assert pro.has_feature(ProductFeature.OFFLINE_ACCESS)
    assert not pro.has_feature(ProductFeature.PRIORITY_SUPPORT)
    assert premium.has_feature(ProductFeature.ADVANCED_ANALYTICS)


def test_unknown_product_lookup():
    with pytest.raises(KeyError):
        get_product_definition("com.example.unknown")

    assert find_product_definition("com.example.unknown") is None
    assert find_product_definition(None) is None

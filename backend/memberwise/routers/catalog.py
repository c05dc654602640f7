"""Catalog router - read-only venue, membership and promotion reference data."""

from fastapi import APIRouter, Depends

from memberwise.data.currency import format_currency, format_rate
from memberwise.dependencies import get_recommendation_engine
from memberwise.services.recommendation.engine import RecommendationEngine

router = APIRouter()


@router.get("/venues")
async def list_venues(engine: RecommendationEngine = Depends(get_recommendation_engine)):
    catalog = engine.catalog
    venues = []
    for venue, pricing in catalog.venues.items():
        entry = {
            "venue": venue.value,
            "name": pricing.name,
            "address": pricing.address,
            "description": pricing.description,
            "adult_price": str(pricing.standard.adult),
            "child_price": str(pricing.standard.child),
            "free_under_age": pricing.child_age_threshold,
            "charges_parking": pricing.charges_parking,
            "welcome_purchase_link": pricing.welcome_purchase_link,
            "welcome_info_link": pricing.welcome_info_link,
        }
        if pricing.has_resident_pricing:
            entry["resident_adult_price"] = str(pricing.resident.adult)
            entry["resident_child_price"] = str(pricing.resident.child)
        venues.append(entry)
    return {"venues": venues}


@router.get("/memberships")
async def list_memberships(engine: RecommendationEngine = Depends(get_recommendation_engine)):
    catalog = engine.catalog
    memberships = []
    for product, tier in catalog.memberships.items():
        memberships.append({
            "product": product.value,
            "label": tier.label,
            "description": tier.description,
            "icon_type": tier.icon_type,
            "home_venues": sorted(v.value for v in tier.home_venues),
            "prices": {
                str(size): str(price)
                for size, price in enumerate(tier.prices, start=1)
                if price > 0
            },
            "max_family_size": tier.max_family_size,
            "guest_discounts": {v.value: format_rate(rate) for v, rate in tier.guest_discounts.items()},
            "purchase_link": tier.purchase_link,
        })
    for product, info in catalog.product_info.items():
        memberships.append({
            "product": product.value,
            "label": info.label,
            "description": info.description,
            "icon_type": info.icon_type,
            "purchase_link": info.purchase_link,
        })
    return {
        "memberships": memberships,
        "parking": {
            "member": format_currency(catalog.parking.member),
            "welcome": format_currency(catalog.parking.welcome),
            "standard": format_currency(catalog.parking.standard),
        },
        "welcome": {
            "price": format_currency(catalog.welcome.membership_price),
            "max_people": catalog.welcome.max_people,
            "single_visit_price": format_currency(catalog.welcome.single_visit_price),
            "eligibility_requirements": list(catalog.welcome.eligibility_requirements),
        },
    }


@router.get("/promotion")
async def promotion(engine: RecommendationEngine = Depends(get_recommendation_engine)):
    promo = engine.catalog.promotion
    return {
        "active": engine.discounts.is_promotion_active(),
        "rate": str(promo.current_rate),
        "minimum_members": promo.minimum_members,
        "eligible_venues": sorted(v.value for v in promo.eligible_venues),
        "eligible_products": sorted(p.value for p in promo.eligible_products),
        "start_date": promo.start_date.isoformat(),
        "end_date": promo.end_date.isoformat(),
        "banner": engine.discounts.promotion_banner(),
    }

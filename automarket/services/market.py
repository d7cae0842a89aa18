from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from automarket.core.errors import ForbiddenError
from automarket.core.logging import setup_logging
from automarket.models.car import Car, CarStatus, Transmission
from automarket.models.user import User
from automarket.schemas.car import AdCopy, MarketInsights, MarketTrends, PriceEstimate, PriceRange
from automarket.services.car import get_car_or_404
from automarket.services.permissions_checker import is_admin

logger = setup_logging()

YEAR_WINDOW = 2
MILEAGE_WINDOW = 20000
MAX_COMPARABLES = 50
# price drops 2% for every 10k km above the comparables' mean mileage
MILEAGE_STEP = 10000
MILEAGE_STEP_ADJUSTMENT = 0.02
FULL_CONFIDENCE_SAMPLE = 30

MAX_TREND_SAMPLE = 100
LOW_DEMAND_BELOW = 10
HIGH_DEMAND_FROM = 30

TRANSMISSION_LABELS = {
    Transmission.AUTOMATIC: "automatic",
    Transmission.MANUAL: "manual",
    Transmission.CVT: "CVT",
}


async def estimate_car_value(db: AsyncSession, brand: str, model: str, year_model: int, mileage: int) -> PriceEstimate:
    result = await db.execute(
        select(Car.price, Car.mileage)
        .where(
            Car.brand == brand,
            Car.model == model,
            Car.year_model.between(year_model - YEAR_WINDOW, year_model + YEAR_WINDOW),
            Car.mileage.between(mileage - MILEAGE_WINDOW, mileage + MILEAGE_WINDOW),
            Car.status == CarStatus.ACTIVE,
        )
        .order_by(Car.id.asc())
        .limit(MAX_COMPARABLES)
    )
    comparables = result.all()

    if not comparables:
        return PriceEstimate(
            estimated_price=None,
            price_range=PriceRange(min=None, max=None),
            confidence=0,
            similar_cars_analyzed=0,
        )

    prices = [float(price) for price, _ in comparables]
    avg_price = sum(prices) / len(prices)
    avg_mileage = sum(car_mileage for _, car_mileage in comparables) / len(comparables)

    mileage_diff = mileage - avg_mileage
    adjusted_price = avg_price * (1 - mileage_diff / MILEAGE_STEP * MILEAGE_STEP_ADJUSTMENT)

    return PriceEstimate(
        estimated_price=round(adjusted_price),
        price_range=PriceRange(min=round(min(prices) * 0.95), max=round(max(prices) * 1.05)),
        confidence=round(min(len(comparables) / FULL_CONFIDENCE_SAMPLE, 1), 2),
        similar_cars_analyzed=len(comparables),
        market_insights=MarketInsights(
            average_price=round(avg_price),
            average_mileage=round(avg_mileage),
            price_trend="below_average" if mileage_diff > 0 else "above_average",
        )
    )


def _ad_text(car: Car, tone: str) -> str:
    features = car.features or []
    mileage = f"{car.mileage:,} km"

    if tone == "luxury":
        parts = [
            f"Introducing this magnificent {car.brand} {car.model} {car.version} {car.year_model}.",
            f"With only {mileage} driven, it strikes the perfect balance between elegance and performance.",
            f"Equipped with {TRANSMISSION_LABELS[car.transmission]} transmission and a {car.fuel.value} engine.",
        ]
        if features:
            parts.append(f"Highlights include {', '.join(features[:3])}.")
        parts.append("A rare opportunity for those who value sophistication and reliability.")
    elif tone == "casual":
        parts = [
            f"{car.brand} {car.model} {car.year_model} in great shape!",
            f"Only {mileage}, {car.color}, {car.transmission.value} gearbox.",
        ]
        if features:
            parts.append(f"Comes with {', '.join(features[:3])} and more.")
        parts.append("Serviced and ready to drive. Offers welcome!")
    else:
        parts = [
            f"{car.brand} {car.model} {car.version} {car.year_model}/{car.year_fab}.",
            f"Vehicle in excellent condition with {mileage}.",
            f"Specifications: transmission {car.transmission.value}, fuel {car.fuel.value}, color {car.color}.",
        ]
        if features:
            parts.append(f"Equipment: {', '.join(features)}.")
        if car.description:
            parts.append(car.description)
        parts.append("Documents up to date. Visits and test drives welcome.")
    return " ".join(parts)


async def generate_ad_copy(db: AsyncSession, car_id: int, actor: User, tone: str = "professional",
                           max_length: int = 500) -> AdCopy:
    """Write listing text for a seller's car in the requested tone"""
    car = await get_car_or_404(db, car_id)
    if car.seller_id != actor.id and not is_admin(actor):
        logger.error(f'User {actor.id} tried to generate ad copy for car {car.id}')
        raise ForbiddenError("You can't write ads for this listing")

    text = _ad_text(car, tone)
    if len(text) > max_length:
        text = text[:max_length - 3] + "..."

    return AdCopy(
        ad_copy=text,
        tone_used=tone,
        length=len(text),
        seo_keywords=[car.brand, car.model, str(car.year_model), car.transmission.value, car.fuel.value],
    )


def demand_level(listing_count: int) -> str:
    if listing_count < LOW_DEMAND_BELOW:
        return "low"
    if listing_count < HIGH_DEMAND_FROM:
        return "medium"
    return "high"


async def analyze_market_trends(db: AsyncSession, brand: str, model: str | None = None) -> MarketTrends:
    conditions = [Car.brand == brand, Car.status == CarStatus.ACTIVE]
    if model is not None:
        conditions.append(Car.model == model)

    result = await db.execute(
        select(Car.price)
        .where(*conditions)
        .order_by(Car.created_at.desc(), Car.id.asc())
        .limit(MAX_TREND_SAMPLE)
    )
    prices = [float(price) for price in result.scalars().all()]

    if not prices:
        return MarketTrends(
            total_listings=0,
            demand_level="unknown",
            recommendations=["Not enough active listings to analyze this market"],
        )

    level = demand_level(len(prices))
    if level == "high":
        recommendations = ["High demand detected. Good time to sell."]
    elif level == "low":
        recommendations = ["Low demand. Invest in quality photos and a detailed description."]
    else:
        recommendations = ["Steady demand. Keep the price close to the market average."]

    return MarketTrends(
        total_listings=len(prices),
        demand_level=level,
        avg_price=round(sum(prices) / len(prices)),
        price_range=PriceRange(min=round(min(prices)), max=round(max(prices))),
        recommendations=recommendations,
    )

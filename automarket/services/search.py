from sqlalchemy import select, func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from automarket.models.car import Car
from automarket.schemas.car import CarFilters, CarSearchResponse, Pagination


def _like_pattern(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def build_car_conditions(filters: CarFilters) -> list:
    """Translate a filter set into AND-ed predicates; absent filters add nothing"""
    conditions = []
    if filters.brand is not None:
        conditions.append(Car.brand == filters.brand)
    if filters.model is not None:
        conditions.append(Car.model == filters.model)
    if filters.min_price is not None:
        conditions.append(Car.price >= filters.min_price)
    if filters.max_price is not None:
        conditions.append(Car.price <= filters.max_price)
    if filters.min_year is not None:
        conditions.append(Car.year_model >= filters.min_year)
    if filters.max_year is not None:
        conditions.append(Car.year_model <= filters.max_year)
    if filters.transmission is not None:
        conditions.append(Car.transmission == filters.transmission)
    if filters.fuel is not None:
        conditions.append(Car.fuel == filters.fuel)
    if filters.status is not None:
        conditions.append(Car.status == filters.status)
    if filters.seller_id is not None:
        conditions.append(Car.seller_id == filters.seller_id)
    if filters.store_id is not None:
        conditions.append(Car.store_id == filters.store_id)
    if filters.search:
        pattern = _like_pattern(filters.search)
        conditions.append(or_(
            Car.brand.ilike(pattern, escape="\\"),
            Car.model.ilike(pattern, escape="\\"),
            Car.version.ilike(pattern, escape="\\"),
            Car.description.ilike(pattern, escape="\\"),
        ))
    return conditions


async def search_cars(db: AsyncSession, filters: CarFilters) -> CarSearchResponse:
    conditions = build_car_conditions(filters)

    total = await db.scalar(select(func.count()).select_from(Car).where(*conditions)) or 0

    data = []
    if filters.limit > 0 and filters.offset < total:
        result = await db.execute(
            select(Car)
            .where(*conditions)
            .order_by(Car.created_at.desc(), Car.id.asc())
            .limit(filters.limit)
            .offset(filters.offset)
        )
        data = list(result.scalars().all())

    return CarSearchResponse(
        data=data,
        pagination=Pagination(
            total=total,
            limit=filters.limit,
            offset=filters.offset,
            has_next=filters.offset + filters.limit < total,
        )
    )

from decimal import Decimal
from types import SimpleNamespace
import pytest
from unittest.mock import AsyncMock, MagicMock, patch
from fastapi import status
from automarket.core.errors import ForbiddenError, NotFoundError, QuotaExceededError
from automarket.main import app
from automarket.models import CarStatus
from automarket.schemas.admin import BanResult
from automarket.schemas.bulk_import import BulkImportItemResult, BulkImportResult
from automarket.schemas.car import AdCopy, CarSearchResponse, MarketTrends, Pagination
from automarket.models.bulk_import import BulkImportStatus
from automarket.utils.token_utils import get_user_from_token


def act_as(user):
    async def _override():
        return user
    app.dependency_overrides[get_user_from_token] = _override


@pytest.mark.asyncio
async def test_search_endpoint_passes_filters(client, car_factory):
    page = CarSearchResponse(
        data=[car_factory(status=CarStatus.ACTIVE)],
        pagination=Pagination(total=1, limit=5, offset=0, has_next=False),
    )

    with patch("automarket.api.cars.search_cars", AsyncMock(return_value=page)) as mock_search:
        response = await client.get("/api/cars", params={"brand": "Toyota", "limit": 5, "min_price": "1000"})

    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["pagination"]["total"] == 1
    assert body["data"][0]["brand"] == "Toyota"
    filters = mock_search.await_args.args[1]
    assert (filters.brand, filters.limit, filters.min_price) == ("Toyota", 5, Decimal("1000"))


@pytest.mark.asyncio
async def test_search_endpoint_rejects_large_limit(client):
    response = await client.get("/api/cars", params={"limit": 500})

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert response.json()["kind"] == "validation_error"


@pytest.mark.asyncio
async def test_create_listing(client, car_factory, car_payload, current_user):
    car = car_factory(seller_id=current_user.id)

    with patch("automarket.api.cars.create_car", AsyncMock(return_value=car)) as mock_create:
        response = await client.post("/api/cars", json=car_payload, headers={"Authorization": "Bearer t"})

    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["status"] == "DRAFT"
    assert mock_create.await_args.args[1] is current_user


@pytest.mark.asyncio
async def test_quota_error_rendered_with_kind(client):
    with patch("automarket.api.cars.set_status", AsyncMock(side_effect=QuotaExceededError("Limit reached"))):
        response = await client.patch("/api/cars/2/status", json={"status": "ACTIVE"})

    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json() == {"kind": "quota_exceeded", "detail": "Limit reached"}


@pytest.mark.asyncio
async def test_not_found_error_rendered(client, mock_db):
    mock_db.get.return_value = None

    response = await client.get("/api/cars/999")

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json() == {"kind": "not_found", "detail": "Car not found"}


@pytest.mark.asyncio
async def test_get_listing_records_view(client, mock_db, car_factory):
    car = car_factory(seller_id=42, status=CarStatus.ACTIVE)
    mock_db.get.return_value = car
    mock_db.add = MagicMock()

    response = await client.get(f"/api/cars/{car.id}")

    assert response.status_code == status.HTTP_200_OK
    mock_db.add.assert_called_once()
    mock_db.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_delete_listing(client):
    with patch("automarket.api.cars.delete_car", AsyncMock()) as mock_delete:
        response = await client.delete("/api/cars/7")

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"message": "Car 7 deleted"}
    mock_delete.assert_awaited_once()


@pytest.mark.asyncio
async def test_admin_dashboard_forbidden_for_users(client):
    response = await client.get("/api/admin/dashboard")

    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json()["kind"] == "forbidden"


@pytest.mark.asyncio
async def test_admin_ban_user(client, user_factory):
    act_as(user_factory("admin"))

    with patch("automarket.api.admin.moderation.ban_user",
               AsyncMock(return_value=BanResult(user_id=1, banned_cars=3))) as mock_ban:
        response = await client.post("/api/admin/users/1/ban", json={"reason": "fraud"})

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"user_id": 1, "banned_cars": 3}
    assert mock_ban.await_args.args[2:] == (1, "fraud")


@pytest.mark.asyncio
async def test_admin_analytics_requires_admin(client):
    response = await client.get("/api/admin/analytics/cars/per-day")

    assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.asyncio
async def test_admin_users_page(client, user_factory):
    admin = user_factory("admin")
    act_as(admin)

    with patch("automarket.api.admin.moderation.list_users",
               AsyncMock(return_value={"data": [admin], "total": 1})):
        response = await client.get("/api/admin/users", params={"role": "admin"})

    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["total"] == 1
    assert body["data"][0]["role"] == "admin"


@pytest.mark.asyncio
async def test_store_analytics_forbidden_for_strangers(client):
    with patch("automarket.api.analytics.ensure_store_access",
               AsyncMock(side_effect=ForbiddenError("Access denied"))):
        response = await client.get("/api/stores/3/analytics")

    assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.asyncio
async def test_public_store_hides_api_key(client, mock_db):
    store = SimpleNamespace(
        id=1, owner_id=2, name="Auto Center", slug="auto-center", logo_url=None,
        document="12.345.678/0001-90", is_verified=True, phone=None, email=None,
        location=None, api_key="secret-key", created_at="2026-10-01T10:00:00Z",
    )
    mock_db.get.return_value = store

    response = await client.get("/api/stores/1")

    assert response.status_code == status.HTTP_200_OK
    assert "api_key" not in response.json()


@pytest.mark.asyncio
async def test_bulk_import_requires_api_key(client, mock_db):
    response = await client.post("/api/bulk-import/cars", json={"cars": [{}]})

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["kind"] == "unauthorized"


@pytest.mark.asyncio
async def test_bulk_import_with_api_key(client, mock_db):
    store = MagicMock(id=5, owner_id=2)
    mock_db.scalar.return_value = store
    result = BulkImportResult(
        job_id=1, status=BulkImportStatus.COMPLETED, total=1, imported=1, failed=0,
        results=[BulkImportItemResult(index=0, success=True, car_id=10)],
    )

    with patch("automarket.api.bulk_import.import_cars", AsyncMock(return_value=result)) as mock_import:
        response = await client.post(
            "/api/bulk-import/cars",
            json={"cars": [{"brand": "Fiat"}]},
            headers={"X-API-Key": "store-key"},
        )

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["results"][0]["car_id"] == 10
    assert mock_import.await_args.args[1] is store


@pytest.mark.asyncio
async def test_photo_upload(client, image_bytes):
    photo = MagicMock(id=1, car_id=3, order_index=0,
                      urls={"thumb": "/media/t.webp", "medium": "/media/m.webp", "large": "/media/l.webp"})
    photo.created_at = "2026-10-01T10:00:00Z"

    with patch("automarket.api.photos.attach_photo", AsyncMock(return_value=photo)) as mock_attach:
        response = await client.post(
            "/api/cars/3/photos",
            files={"image": ("car.jpg", image_bytes, "image/jpeg")},
            data={"order_index": "0"},
        )

    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["urls"]["thumb"] == "/media/t.webp"
    assert mock_attach.await_args.args[3] == image_bytes


@pytest.mark.asyncio
async def test_photo_upload_order_out_of_range(client, image_bytes):
    response = await client.post(
        "/api/cars/3/photos",
        files={"image": ("car.jpg", image_bytes, "image/jpeg")},
        data={"order_index": "15"},
    )

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


@pytest.mark.asyncio
async def test_profile_not_found(client):
    with patch("automarket.api.users.get_profile", AsyncMock(side_effect=NotFoundError("Profile not found"))):
        response = await client.get("/api/users/me/profile")

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["detail"] == "Profile not found"


@pytest.mark.asyncio
async def test_market_trends_endpoint(client):
    trends = MarketTrends(total_listings=0, demand_level="unknown", recommendations=["No data"])

    with patch("automarket.api.cars.analyze_market_trends", AsyncMock(return_value=trends)) as mock_trends:
        response = await client.get("/api/cars/market-trends", params={"brand": "Toyota", "model": "Corolla"})

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["demand_level"] == "unknown"
    assert mock_trends.await_args.args[1:] == ("Toyota", "Corolla")


@pytest.mark.asyncio
async def test_ad_copy_endpoint(client, current_user):
    ad = AdCopy(ad_copy="Toyota Corolla", tone_used="casual", length=14, seo_keywords=["Toyota"])

    with patch("automarket.api.cars.generate_ad_copy", AsyncMock(return_value=ad)) as mock_generate:
        response = await client.post("/api/cars/4/ad-copy", json={"tone": "casual", "max_length": 100})

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["tone_used"] == "casual"
    assert mock_generate.await_args.args[1:] == (4, current_user, "casual", 100)


@pytest.mark.asyncio
async def test_ad_copy_rejects_unknown_tone(client):
    response = await client.post("/api/cars/4/ad-copy", json={"tone": "angry"})

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

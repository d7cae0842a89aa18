import os
import tempfile

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("MEDIA_ROOT", tempfile.mkdtemp(prefix="automarket-media-"))

from datetime import datetime, timezone
from decimal import Decimal
from io import BytesIO
from PIL import Image
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from unittest.mock import AsyncMock
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from automarket.db.database import get_db
from automarket.main import app
from automarket.models import (
    Base,
    User as UserModel,
    UserRole,
    Store as StoreModel,
    Car as CarModel,
    CarStatus,
    Transmission,
    Fuel,
)
from automarket.utils.token_utils import get_user_from_token, get_optional_user_from_token


@pytest_asyncio.fixture
async def client():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def mock_db():
    return AsyncMock(spec=AsyncSession)


@pytest_asyncio.fixture(autouse=True)
def override_db_dependency(mock_db):
    async def _override():
        yield mock_db
    app.dependency_overrides[get_db] = _override
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def current_user(user_factory):
    return user_factory("user")


@pytest.fixture(autouse=True)
def override_user_dependency(current_user):
    async def _override():
        return current_user
    app.dependency_overrides[get_user_from_token] = _override
    app.dependency_overrides[get_optional_user_from_token] = _override
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def user_factory():
    def _create_user(user_type: str, user_id: int | None = None):
        roles = {
            "user": (1, UserRole.USER),
            "store_owner": (2, UserRole.STORE_OWNER),
            "admin": (3, UserRole.ADMIN),
        }
        if user_type not in roles:
            return None
        default_id, role = roles[user_type]
        uid = user_id or default_id
        now = datetime.now(timezone.utc)
        return UserModel(
            id=uid,
            auth_user_id=f"auth-{uid}",
            email=f"test{uid}@example.com",
            name=f"Test{uid}",
            role=role,
            created_at=now,
            updated_at=now,
            last_signed_in=now,
        )
    return _create_user


@pytest.fixture
def car_factory():
    def _create_car(car_id: int = 1, seller_id: int = 1, **overrides):
        now = datetime.now(timezone.utc)
        fields = dict(
            id=car_id,
            seller_id=seller_id,
            store_id=None,
            brand="Toyota",
            model="Corolla",
            version="XEi 2.0",
            year_fab=2020,
            year_model=2021,
            price=Decimal("95000.00"),
            mileage=30000,
            transmission=Transmission.AUTOMATIC,
            fuel=Fuel.FLEX,
            color="Silver",
            description="Single owner",
            features=["air conditioning"],
            status=CarStatus.DRAFT,
            created_at=now,
            updated_at=now,
        )
        fields.update(overrides)
        return CarModel(**fields)
    return _create_car


@pytest.fixture
def car_payload():
    return {
        "brand": "Toyota",
        "model": "Corolla",
        "version": "XEi 2.0",
        "year_fab": 2020,
        "year_model": 2021,
        "price": "95000.00",
        "mileage": 30000,
        "transmission": "AUTOMATIC",
        "fuel": "FLEX",
        "color": "Silver",
        "description": "Single owner",
        "features": ["air conditioning"],
    }


@pytest.fixture
def image_bytes():
    image = Image.new("RGB", (1500, 1000), color="red")
    buffer = BytesIO()
    image.save(buffer, format="JPEG")
    return buffer.getvalue()


@pytest_asyncio.fixture
async def db():
    """A real session on an in-memory SQLite database with the full schema"""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session
    await engine.dispose()


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    async def _make_user(role: UserRole = UserRole.USER, email: str | None = None) -> UserModel:
        counter["n"] += 1
        n = counter["n"]
        user = UserModel(
            auth_user_id=f"identity-{n}",
            email=email or f"user{n}@example.com",
            name=f"User {n}",
            role=role,
        )
        db.add(user)
        await db.commit()
        await db.refresh(user)
        return user
    return _make_user


@pytest.fixture
def make_store(db):
    counter = {"n": 0}

    async def _make_store(owner: UserModel, slug: str | None = None) -> StoreModel:
        counter["n"] += 1
        n = counter["n"]
        store = StoreModel(
            owner_id=owner.id,
            name=f"Store {n}",
            slug=slug or f"store-{n}",
            document="12.345.678/0001-90",
            api_key=f"test-api-key-{n:0>19}",
        )
        db.add(store)
        await db.commit()
        await db.refresh(store)
        return store
    return _make_store


@pytest.fixture
def make_car(db):
    async def _make_car(seller: UserModel, **overrides) -> CarModel:
        fields = dict(
            seller_id=seller.id,
            brand="Toyota",
            model="Corolla",
            version="XEi 2.0",
            year_fab=2020,
            year_model=2021,
            price=Decimal("95000.00"),
            mileage=30000,
            transmission=Transmission.AUTOMATIC,
            fuel=Fuel.FLEX,
            color="Silver",
            status=CarStatus.DRAFT,
        )
        fields.update(overrides)
        car = CarModel(**fields)
        db.add(car)
        await db.commit()
        await db.refresh(car)
        return car
    return _make_car

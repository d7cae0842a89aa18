import asyncio
import io
import uuid
from PIL import Image, ImageOps, UnidentifiedImageError
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from automarket.core.config import settings
from automarket.core.errors import CapacityError, ForbiddenError, NotFoundError, ValidationError
from automarket.core.logging import setup_logging
from automarket.models.photo import CarPhoto
from automarket.models.user import User
from automarket.schemas.photo import PhotoOrderUpdate
from automarket.services.car import get_car_or_404
from automarket.utils.storage import storage

logger = setup_logging()

# name -> (width, height, webp quality)
RENDITIONS = {
    "thumb": (400, 300, 80),
    "medium": (800, 600, 85),
    "large": (1600, 1200, 90),
}


def render_renditions(image_bytes: bytes) -> dict[str, bytes]:
    """Resize an uploaded image into the thumb/medium/large WEBP renditions"""
    try:
        image = Image.open(io.BytesIO(image_bytes))
        image.load()
        image = image.convert("RGB")
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError):
        raise ValidationError("Invalid image file")

    renditions = {}
    for name, (width, height, quality) in RENDITIONS.items():
        resized = ImageOps.fit(image, (width, height), Image.Resampling.LANCZOS)
        buffer = io.BytesIO()
        resized.save(buffer, format="WEBP", quality=quality)
        renditions[name] = buffer.getvalue()
    return renditions


async def count_photos(db: AsyncSession, car_id: int) -> int:
    result = await db.scalar(select(func.count()).select_from(CarPhoto).where(CarPhoto.car_id == car_id))
    return result or 0


async def attach_photo(
        db: AsyncSession,
        car_id: int,
        actor: User,
        image_bytes: bytes,
        order_index: int) -> CarPhoto:
    car = await get_car_or_404(db, car_id)
    if car.seller_id != actor.id:
        raise ForbiddenError("You can't add photos to this listing")

    if await count_photos(db, car.id) >= settings.max_photos_per_car:
        raise CapacityError(f"Maximum of {settings.max_photos_per_car} photos per listing")

    renditions = await asyncio.to_thread(render_renditions, image_bytes)

    file_id = uuid.uuid4().hex[:10]
    urls = {}
    for name, data in renditions.items():
        urls[name] = await storage.put(f"cars/{car.id}/{name}-{file_id}.webp", data, "image/webp")

    photo = CarPhoto(car_id=car.id, urls=urls, order_index=order_index)
    db.add(photo)
    await db.commit()
    await db.refresh(photo)
    logger.info(f"Photo {photo.id} attached to car {car.id}")
    return photo


async def list_photos(db: AsyncSession, car_id: int) -> list[CarPhoto]:
    result = await db.execute(
        select(CarPhoto).where(CarPhoto.car_id == car_id).order_by(CarPhoto.order_index.asc(), CarPhoto.id.asc())
    )
    return list(result.scalars().all())


async def _get_owned_photo(db: AsyncSession, photo_id: int, actor: User) -> CarPhoto:
    photo = await db.get(CarPhoto, photo_id)
    if not photo:
        raise NotFoundError("Photo not found")
    car = await get_car_or_404(db, photo.car_id)
    if car.seller_id != actor.id:
        raise ForbiddenError("You can't manage photos of this listing")
    return photo


async def delete_photo(db: AsyncSession, photo_id: int, actor: User) -> None:
    photo = await _get_owned_photo(db, photo_id, actor)
    storage.delete(list(photo.urls.values()))
    await db.delete(photo)
    await db.commit()


async def reorder_photos(db: AsyncSession, actor: User, updates: list[PhotoOrderUpdate]) -> None:
    for update in updates:
        photo = await _get_owned_photo(db, update.photo_id, actor)
        photo.order_index = update.order_index
    await db.commit()

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession
from automarket.db.database import get_db
from automarket.models.user import User
from automarket.schemas.common import MessageResponse
from automarket.schemas.photo import CarPhoto as CarPhotoResponse, PhotoReorder
from automarket.services.photo import attach_photo, delete_photo, list_photos, reorder_photos
from automarket.utils.token_utils import get_user_from_token

router = APIRouter(tags=["photos"])


@router.post("/cars/{car_id}/photos", response_model=CarPhotoResponse, status_code=status.HTTP_201_CREATED)
async def upload_photo(
        car_id: int,
        image: UploadFile = File(...),
        order_index: int = Form(..., ge=0, le=14),
        user: User = Depends(get_user_from_token),
        db: AsyncSession = Depends(get_db)):
    """Upload a photo; it is stored as thumb, medium and large WEBP renditions"""
    image_bytes = await image.read()
    return await attach_photo(db, car_id, user, image_bytes, order_index)


@router.get("/cars/{car_id}/photos", response_model=list[CarPhotoResponse], status_code=status.HTTP_200_OK)
async def get_photos(car_id: int, db: AsyncSession = Depends(get_db)):
    return await list_photos(db, car_id)


@router.put("/photos/order", response_model=MessageResponse, status_code=status.HTTP_200_OK)
async def change_photo_order(
        request: PhotoReorder,
        user: User = Depends(get_user_from_token),
        db: AsyncSession = Depends(get_db)):
    await reorder_photos(db, user, request.updates)
    return MessageResponse(message="Photos reordered")


@router.delete("/photos/{photo_id}", response_model=MessageResponse, status_code=status.HTTP_200_OK)
async def remove_photo(
        photo_id: int,
        user: User = Depends(get_user_from_token),
        db: AsyncSession = Depends(get_db)):
    await delete_photo(db, photo_id, user)
    return MessageResponse(message=f"Photo {photo_id} deleted")

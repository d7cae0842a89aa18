from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from automarket.db.database import get_db
from automarket.models.store import Store
from automarket.schemas.bulk_import import BulkImportRequest, BulkImportResult
from automarket.services.bulk_import import import_cars
from automarket.utils.api_key import get_store_from_api_key

router = APIRouter(prefix="/bulk-import", tags=["bulk-import"])


@router.post("/cars", response_model=BulkImportResult, status_code=status.HTTP_200_OK)
async def bulk_import_cars(
        request: BulkImportRequest,
        store: Store = Depends(get_store_from_api_key),
        db: AsyncSession = Depends(get_db)):
    """Import listings for the store owning the X-API-Key"""
    return await import_cars(db, store, request.cars)

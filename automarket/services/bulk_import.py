from datetime import datetime, timezone
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from automarket.core.config import settings
from automarket.core.errors import MarketplaceError, NotFoundError, ValidationError
from automarket.core.logging import setup_logging
from automarket.models.bulk_import import BulkImportJob, BulkImportStatus
from automarket.models.store import Store
from automarket.models.user import User
from automarket.schemas.bulk_import import BulkImportItemResult, BulkImportResult
from automarket.schemas.car import CarCreate
from automarket.services.car import create_car

logger = setup_logging()


def _format_validation_error(e: PydanticValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in e.errors()
    )


async def import_cars(db: AsyncSession, store: Store, items: list[dict]) -> BulkImportResult:
    """Create listings for a store one by one; a bad item never stops the batch"""
    if not items:
        raise ValidationError("Nothing to import")
    if len(items) > settings.bulk_import_limit:
        raise ValidationError(f"At most {settings.bulk_import_limit} cars per import")

    store_id, owner_id = store.id, store.owner_id
    job = BulkImportJob(store_id=store_id, status=BulkImportStatus.PROCESSING, total_records=len(items))
    db.add(job)
    await db.commit()
    job_id = job.id

    results = []
    for index, item in enumerate(items):
        try:
            owner = await db.get(User, owner_id)
            if not owner:
                raise NotFoundError("Store owner not found")
            car_data = CarCreate.model_validate({**item, "store_id": store_id})
            car = await create_car(db, owner, car_data)
            results.append(BulkImportItemResult(index=index, success=True, car_id=car.id))
        except PydanticValidationError as e:
            results.append(BulkImportItemResult(index=index, success=False, error=_format_validation_error(e)))
        except MarketplaceError as e:
            results.append(BulkImportItemResult(index=index, success=False, error=e.detail))
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"Bulk import {job_id} item {index} failed: {e}")
            results.append(BulkImportItemResult(index=index, success=False, error="Database error"))

    imported = sum(1 for result in results if result.success)
    failed = len(results) - imported

    job = await db.get(BulkImportJob, job_id)
    job.processed_records = imported
    job.failed_records = failed
    job.error_log = [result.model_dump() for result in results if not result.success] or None
    job.status = BulkImportStatus.COMPLETED if imported else BulkImportStatus.FAILED
    job.completed_at = datetime.now(timezone.utc)
    await db.commit()
    logger.info(f"Bulk import {job_id} for store {store_id}: {imported} imported, {failed} failed")

    return BulkImportResult(
        job_id=job_id,
        status=job.status,
        total=len(items),
        imported=imported,
        failed=failed,
        results=results,
    )

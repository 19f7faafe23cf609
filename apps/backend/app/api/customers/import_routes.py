"""Bulk customer import API route."""

import logging

from fastapi import APIRouter, File, HTTPException, Request, UploadFile, status

from packages.core.customer_import import (
    ImportOptions,
    ImportPipelineError,
    ImportResult,
    UploadedFile,
    run_import,
)

from app.core.config import get_settings
from app.core.constants import IMPORT_FAILED_MESSAGE
from app.core.dependencies import AsyncSessionDep, CurrentUser
from app.services.customer_service import SqlAlchemyCustomerSink

router = APIRouter()
logger = logging.getLogger(__name__)
settings = get_settings()


async def _read_upload(file: UploadFile | None) -> UploadedFile | None:
    if file is None:
        return None
    # One byte past the limit is enough for intake to reject the payload
    data = await file.read(settings.import_max_upload_bytes + 1)
    return UploadedFile(
        filename=file.filename,
        content_type=file.content_type,
        data=data,
    )


@router.post(
    "/import",
    response_model=ImportResult,
    response_model_exclude_none=True,
)
async def import_customers(
    request: Request,
    current_user: CurrentUser,
    session: AsyncSessionDep,
    file: UploadFile | None = File(None),
) -> ImportResult:
    """
    Import customers from an uploaded ``.xlsx``, ``.xls`` or ``.csv`` file.

    Rows are inserted one at a time; rows that fail validation or collide
    with an existing account number are reported in ``errors`` and do not
    stop the import.

    Raises:
        ImportPipelineError: Rendered as 400/413/500 by the app's handlers.
        HTTPException 500: On any other unexpected failure.
    """
    created_by = current_user.id
    options = ImportOptions(
        max_upload_bytes=settings.import_max_upload_bytes,
        max_rows=settings.import_max_rows,
        timeout_seconds=settings.import_timeout_seconds,
    )

    try:
        upload = await _read_upload(file)
        return await run_import(
            upload,
            SqlAlchemyCustomerSink(session),
            created_by=created_by,
            options=options,
            should_cancel=request.is_disconnected,
        )
    except ImportPipelineError:
        raise
    except Exception:
        logger.exception("Import error")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=IMPORT_FAILED_MESSAGE,
        )
    finally:
        if file is not None:
            await file.close()

"""Upload API routes."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, Response
from fastapi.responses import JSONResponse
from starlette.datastructures import UploadFile

from filedrop.api.dependencies import get_orchestrator
from filedrop.models.upload import (
    ErrorResponse,
    UploadItem,
    UploadResponse,
    outcome_to_result,
)
from filedrop.services.uploader.exceptions import RequestError
from filedrop.services.uploader.orchestrator import UploadOrchestrator

router = APIRouter(tags=["upload"])
logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


async def read_upload_items(request: Request) -> list[UploadItem]:
    """Read every ``file`` field of a multipart body.

    Raises:
        RequestError: If the body is malformed or holds no files
    """
    # python-multipart parse errors are not wrapped by starlette
    try:
        form = await request.form()
    except Exception as e:
        logger.warning(f"Could not parse upload body: {e}")
        raise RequestError("Invalid multipart body") from e

    try:
        items = []
        for value in form.getlist("file"):
            if not isinstance(value, UploadFile):
                continue
            items.append(
                UploadItem(
                    filename=value.filename or "",
                    content_type=value.content_type or "",
                    data=await value.read(),
                )
            )
    finally:
        await form.close()

    if not items:
        raise RequestError("No files provided")
    return items


@router.post(
    "/upload",
    response_model=UploadResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def upload_files(
    request: Request,
    compress: Optional[str] = Query(None, description="\"true\" re-encodes JPEG, PNG and WebP images"),
    orchestrator: UploadOrchestrator = Depends(get_orchestrator),
):
    """Upload one or more files sent as ``file`` fields."""
    try:
        items = await read_upload_items(request)
    except RequestError as e:
        return JSONResponse(status_code=400, content={"error": str(e)})

    try:
        batch = await orchestrator.process_batch(items, compress=compress == "true")
    except Exception as e:
        logger.error(f"Unexpected error during upload: {e}", exc_info=True)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    return UploadResponse(results=[outcome_to_result(outcome) for outcome in batch.outcomes])


@router.options("/upload")
async def upload_preflight() -> Response:
    """CORS preflight for the upload endpoint."""
    return Response(status_code=200, headers=CORS_HEADERS)

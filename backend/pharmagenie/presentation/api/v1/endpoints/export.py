"""CSV / Excel export endpoints — files are built in memory and downloaded."""

from datetime import datetime

from fastapi import APIRouter, HTTPException, status
from fastapi.responses import Response

from pharmagenie.application.schemas import ExportRequest
from pharmagenie.domain.exceptions import ExportError
from pharmagenie.infrastructure.export import (
    CSV_MEDIA_TYPE,
    EXCEL_MEDIA_TYPE,
    export_csv,
    export_excel,
    export_response_csv,
    export_response_excel,
)

router = APIRouter(prefix="/export", tags=["Export"])


def _filename(stem: str, extension: str) -> str:
    return f"{stem}_{datetime.now().strftime('%Y%m%d_%H%M%S')}.{extension}"


def _download(content: bytes, media_type: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/csv")
async def export_to_csv(request: ExportRequest) -> Response:
    """CSV download for a single collection."""
    try:
        if request.response_data is not None:
            content, collection = export_response_csv(request.response_data)
        else:
            collection = request.collection_type
            content = export_csv(request.data, collection)
    except ExportError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return _download(content, CSV_MEDIA_TYPE, _filename(collection, "csv"))


@router.post("/excel")
async def export_to_excel(request: ExportRequest) -> Response:
    """Excel download; multi-collection responses get one sheet per collection."""
    try:
        if request.response_data is not None:
            content, collection = export_response_excel(request.response_data)
        else:
            collection = request.collection_type
            content = export_excel(request.data, collection)
    except ExportError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return _download(content, EXCEL_MEDIA_TYPE, _filename(collection or "pharma_data", "xlsx"))

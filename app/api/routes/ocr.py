"""
OCR endpoint: PDF upload in, extracted text out.

Errors are returned as ``{"error": message}`` so the dashboard can show the
message as-is.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from starlette.datastructures import UploadFile
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import CredentialsError, Settings, get_settings
from app.core.rate_limit import rate_limited
from app.services.ocr_service import (
    OCRService,
    get_gcloud_clients,
    remove_temp_file,
    safe_filename,
    save_upload_to_temp,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["OCR"])


class OCRRequestError(Exception):
    """Raised from OCR dependencies; rendered as ``{"error": message}``."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def ocr_error_handler(request: Request, exc: OCRRequestError) -> JSONResponse:
    return _error(exc.status_code, exc.message)


async def uploaded_file(request: Request):
    """
    Yield the multipart ``file`` part, or None when the body has no file.

    A text field named ``file`` or an unparsable body counts as no file.
    """
    form = None
    try:
        form = await request.form()
    except StarletteHTTPException as e:
        logger.warning(f"Unreadable OCR form body: {e.detail}")
    if form is None:
        yield None
        return

    try:
        upload = form.get("file")
        yield upload if isinstance(upload, UploadFile) and upload.filename else None
    finally:
        await form.close()


ocr_rate_limit = rate_limited(
    max_requests=10,
    window_seconds=60,
    exc_factory=lambda message: OCRRequestError(status.HTTP_429_TOO_MANY_REQUESTS, message),
)


@router.post("/ocr", dependencies=[Depends(ocr_rate_limit)])
def extract_pdf_text(
    file: Optional[UploadFile] = Depends(uploaded_file),
    settings: Settings = Depends(get_settings),
):
    """
    Run OCR over an uploaded PDF.

    Returns 200 ``{"text": ...}``, 400 when no file was sent, 500 when the
    credentials or any cloud call fail.
    """
    if file is None:
        logger.warning("OCR request without a file")
        return _error(status.HTTP_400_BAD_REQUEST, "File not sent")

    filename = safe_filename(file.filename)
    logger.info(f"OCR request received: filename={filename}, content_type={file.content_type}")

    try:
        temp_path = save_upload_to_temp(file.file, settings.tmp_dir, filename)
    except OSError as e:
        logger.error(f"Could not spool upload to {settings.tmp_dir}: {e}")
        return _error(status.HTTP_400_BAD_REQUEST, "Uploaded file has no temporary path")

    try:
        clients = get_gcloud_clients(settings)
        service = OCRService.from_settings(clients, settings)
        text = service.extract_text(temp_path, filename, content_type=file.content_type)
        return {"text": text}
    except CredentialsError as e:
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, str(e))
    except Exception as e:
        logger.error(f"OCR processing failed for {filename}: {e}", exc_info=True)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, str(e))
    finally:
        remove_temp_file(temp_path)


@router.api_route("/ocr", methods=["GET", "PUT", "PATCH", "DELETE", "OPTIONS"], include_in_schema=False)
def ocr_method_not_allowed():
    return _error(status.HTTP_405_METHOD_NOT_ALLOWED, "Method not allowed")

from __future__ import annotations

import logging
import re
import shutil
import time
from pathlib import Path
from typing import Any
from uuid import uuid4

from fastapi import FastAPI, File, Form, HTTPException, UploadFile
from fastapi.responses import FileResponse, JSONResponse
from pypdf.errors import PdfReadError

from handbind import __version__
from handbind.constants import (
    DEFAULT_ARTIFACT_DIR,
    DEFAULT_ARTIFACT_RETENTION_SECONDS,
    DEFAULT_MINIMUM_REMAINDER_SIZE,
    DEFAULT_SIGNATURE_SIZE,
)
from handbind.events import log_event
from handbind.imposition.core import SignatureParams
from handbind.imposition.driver import deterministic_output_filename, rearrange_document
from handbind.imposition.pdf_store import PdfPageStore

_REQUEST_ID_PATTERN = re.compile(r"^[a-f0-9]{32}$")
_EXPIRED_ARTIFACT_MESSAGE = "This download link has expired after cleanup. Regenerate the PDF to create a new link."
_LOGGER = logging.getLogger("handbind.web")


def _cleanup_stale_artifacts(
    artifact_dir: Path,
    *,
    retention_seconds: int,
    now: float | None = None,
) -> int:
    if retention_seconds < 0:
        return 0

    cutoff = (time.time() if now is None else now) - retention_seconds
    removed = 0
    for child in artifact_dir.iterdir():
        try:
            is_stale = child.stat().st_mtime < cutoff
        except FileNotFoundError:
            continue

        if not is_stale:
            continue

        if child.is_dir():
            shutil.rmtree(child, ignore_errors=True)
        else:
            child.unlink(missing_ok=True)
        removed += 1

    return removed


def _validated_filename(filename: str) -> str:
    if "\\" in filename:
        raise HTTPException(status_code=400, detail="Invalid filename")

    safe_name = Path(filename).name
    if safe_name != filename or safe_name in {"", ".", ".."}:
        raise HTTPException(status_code=400, detail="Invalid filename")
    return safe_name


def _validate_upload_metadata(file: UploadFile | None) -> tuple[str | None, str | None]:
    if file is None or not file.filename:
        return None, "Upload a PDF file to continue."

    source_name = Path(file.filename).name
    if Path(source_name).suffix.lower() != ".pdf":
        return None, "Only .pdf uploads are supported."

    return source_name, None


def _impose_payload(
    *,
    payload: bytes,
    source_name: str,
    params: SignatureParams,
    end_pages: bool,
    artifact_dir: Path,
    artifact_retention_seconds: int,
    job_id: str | None = None,
) -> tuple[dict[str, Any] | None, str | None]:
    if not payload:
        log_event(_LOGGER, logging.WARNING, "impose.job.empty_upload", job_id=job_id, source_name=source_name)
        return None, "The uploaded file is empty."

    try:
        store = PdfPageStore.from_bytes(payload)
    except PdfReadError:
        log_event(
            _LOGGER,
            logging.WARNING,
            "impose.job.invalid_pdf",
            job_id=job_id,
            source_name=source_name,
            payload_bytes=len(payload),
        )
        return None, "The upload could not be parsed as a PDF. Verify the file is a valid, non-corrupted PDF and retry."
    except ValueError as exc:
        log_event(_LOGGER, logging.WARNING, "impose.job.rejected_pdf", job_id=job_id, source_name=source_name)
        return None, f"The upload cannot be imposed: {exc}."

    if store.get_page_count() == 0:
        log_event(_LOGGER, logging.WARNING, "impose.job.no_pages", job_id=job_id, source_name=source_name)
        return None, "The uploaded PDF has no pages."

    removed = _cleanup_stale_artifacts(
        artifact_dir,
        retention_seconds=artifact_retention_seconds,
    )

    request_id = uuid4().hex
    output_name = deterministic_output_filename(source_name)
    output_path = artifact_dir / request_id / output_name

    try:
        summary = rearrange_document(store, params, end_pages=end_pages)
        output_pages = store.write(output_path)
    except ValueError as exc:
        log_event(
            _LOGGER,
            logging.WARNING,
            "impose.job.arrangement_failed",
            job_id=job_id,
            source_name=source_name,
            error=str(exc),
        )
        return None, f"The document could not be arranged into signatures: {exc}."
    except Exception:
        _LOGGER.exception(
            "impose.job.unexpected_failure",
            extra={
                "event_name": "impose.job.unexpected_failure",
                "event_fields": {"job_id": job_id, "source_name": source_name},
            },
        )
        return None, "Imposition failed unexpectedly. Retry and check server logs for the associated job."

    log_event(
        _LOGGER,
        logging.INFO,
        "impose.job.completed",
        job_id=job_id,
        request_id=request_id,
        source_name=source_name,
        source_pages=summary.source_pages,
        blank_pages=summary.blank_pages,
        output_pages=output_pages,
        signatures=len(summary.signatures),
        stale_artifacts_removed=removed,
    )

    return {
        "status": "success",
        "message": "Imposition complete.",
        "download_url": f"/download/{request_id}/{output_name}",
        "output_filename": output_name,
        "source_pages": summary.source_pages,
        "blank_pages": summary.blank_pages,
        "output_pages": output_pages,
        "signatures": summary.sheet_counts,
        "signature_size": params.signature_size,
        "minimum_remainder_size": params.minimum_remainder_size,
        "end_pages": end_pages,
    }, None


def _resolve_request_artifact_path(artifact_dir: Path, request_id: str, filename: str) -> Path:
    if _REQUEST_ID_PATTERN.fullmatch(request_id) is None:
        log_event(_LOGGER, logging.WARNING, "download.request.invalid_request_id", request_id=request_id, filename=filename)
        raise HTTPException(status_code=400, detail="Invalid request id")

    safe_name = _validated_filename(filename)
    request_artifact_dir = artifact_dir / request_id
    if not request_artifact_dir.is_dir():
        log_event(_LOGGER, logging.WARNING, "download.request.expired", request_id=request_id, filename=safe_name)
        raise HTTPException(status_code=410, detail=_EXPIRED_ARTIFACT_MESSAGE)

    file_path = request_artifact_dir / safe_name
    if not file_path.is_file():
        log_event(_LOGGER, logging.WARNING, "download.request.missing_file", request_id=request_id, filename=safe_name)
        raise HTTPException(status_code=404, detail="File not found")

    return file_path


def _error_response(message: str, status_code: int = 400) -> JSONResponse:
    return JSONResponse({"status": "error", "message": message}, status_code=status_code)


def create_app(
    artifact_dir: Path | None = None,
    artifact_retention_seconds: int = DEFAULT_ARTIFACT_RETENTION_SECONDS,
) -> FastAPI:
    app = FastAPI(title="handbind", version=__version__)

    target_artifact_dir = artifact_dir or (Path.cwd() / DEFAULT_ARTIFACT_DIR)
    target_artifact_dir.mkdir(parents=True, exist_ok=True)
    app.state.artifact_dir = target_artifact_dir
    app.state.artifact_retention_seconds = artifact_retention_seconds

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/impose")
    async def impose(
        file: UploadFile | None = File(default=None),
        signature_size: int = Form(DEFAULT_SIGNATURE_SIZE, ge=1),
        minimum_remainder_size: int = Form(DEFAULT_MINIMUM_REMAINDER_SIZE, ge=0),
        end_pages: bool = Form(False),
    ) -> JSONResponse:
        job_id = uuid4().hex
        log_event(
            _LOGGER,
            logging.INFO,
            "impose.request.received",
            job_id=job_id,
            signature_size=signature_size,
            minimum_remainder_size=minimum_remainder_size,
            end_pages=end_pages,
            has_upload=file is not None and bool(file.filename),
        )

        source_name, upload_error = _validate_upload_metadata(file)
        if upload_error is not None or file is None or source_name is None:
            error = upload_error or "Upload a PDF file to continue."
            log_event(_LOGGER, logging.WARNING, "impose.request.upload_validation_failed", job_id=job_id, error=error)
            return _error_response(error)

        params = SignatureParams(
            signature_size=signature_size,
            minimum_remainder_size=minimum_remainder_size,
        )
        payload = await file.read()
        result, impose_error = _impose_payload(
            payload=payload,
            source_name=source_name,
            params=params,
            end_pages=end_pages,
            artifact_dir=app.state.artifact_dir,
            artifact_retention_seconds=app.state.artifact_retention_seconds,
            job_id=job_id,
        )
        if impose_error is not None:
            log_event(_LOGGER, logging.WARNING, "impose.request.failed", job_id=job_id, source_name=source_name, error=impose_error)
            return _error_response(impose_error)

        if result is None:
            log_event(_LOGGER, logging.ERROR, "impose.request.missing_result", job_id=job_id, source_name=source_name)
            return _error_response("Imposition failed.", status_code=500)

        log_event(
            _LOGGER,
            logging.INFO,
            "impose.request.succeeded",
            job_id=job_id,
            source_name=source_name,
            output_filename=result["output_filename"],
            output_pages=result["output_pages"],
            download_url=result["download_url"],
        )
        return JSONResponse(result)

    @app.get("/download/{request_id}/{filename:path}")
    def download_request_artifact(request_id: str, filename: str) -> FileResponse:
        file_path = _resolve_request_artifact_path(app.state.artifact_dir, request_id, filename)
        return FileResponse(path=file_path, media_type="application/pdf", filename=file_path.name)

    return app


app = create_app()

"""
FastAPI upload service around the normalization core.

Run with:
    pdf_to_text serve --port 3000

Routes:
    GET  /          -> service description
    POST /convert   -> multipart ``pdfFile`` upload; ``?format=download`` returns an
                       attachment, any other value returns JSON
"""

from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import quote

from fastapi import FastAPI, File, Query, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.concurrency import run_in_threadpool

from pdf_to_text import __version__
from pdf_to_text.config import PipelineSpec, ServerSettings, load_server_settings
from pdf_to_text.core import build_result, convert_pdf, default_spec
from pdf_to_text.errors import ExtractionError

logger = logging.getLogger(__name__)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code, content={"success": False, "error": message}
    )


def _content_disposition(filename: str) -> str:
    """Attachment header with an ASCII fallback name and an RFC 5987 UTF-8 name."""
    fallback = "".join(c for c in filename if " " <= c <= "~" and c not in "\"\\")
    encoded = quote(filename, safe="")
    return (
        f'attachment; filename="{fallback or "document.txt"}"; '
        f"filename*=UTF-8''{encoded}"
    )


async def _read_limited(upload: UploadFile, limit: int) -> Optional[bytes]:
    """Read ``upload`` fully, or return None once it exceeds ``limit`` bytes."""
    data = await upload.read(limit + 1)
    return None if len(data) > limit else data


def create_app(
    settings: ServerSettings | None = None, spec: PipelineSpec | None = None
) -> FastAPI:
    settings = settings or load_server_settings()
    spec = spec or default_spec()

    app = FastAPI(
        title="PDF to Text Converter API",
        version=__version__,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    def index() -> dict:
        return {
            "message": "PDF to Text Converter API",
            "version": __version__,
            "endpoint": "/convert - POST to convert PDF to text",
        }

    @app.post("/convert")
    async def convert(
        pdf_file: Optional[UploadFile] = File(None, alias="pdfFile"),
        fmt: str = Query("json", alias="format"),
    ):
        if pdf_file is None:
            return _error(400, "No PDF file uploaded")
        if "pdf" not in (pdf_file.content_type or ""):
            return _error(400, "Uploaded file is not a PDF")

        data = await _read_limited(pdf_file, settings.max_upload_bytes)
        if data is None:
            return _error(413, "File exceeds the maximum upload size")

        try:
            text = await run_in_threadpool(convert_pdf, data, spec)
        except ExtractionError as exc:
            logger.info("extraction failed for %s: %s", pdf_file.filename, exc)
            return _error(422, "Failed to extract text from PDF")
        except Exception:
            logger.exception("error processing %s", pdf_file.filename)
            return _error(500, "An error occurred while processing the PDF")

        result = build_result(text, pdf_file.filename or "document.pdf")
        logger.info("converted %s (%d chars)", pdf_file.filename, result.characters)
        if fmt == "download":
            return PlainTextResponse(
                result.text,
                headers={"Content-Disposition": _content_disposition(result.filename)},
            )
        return result

    @app.exception_handler(Exception)
    async def _unhandled(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("unhandled error on %s", request.url.path)
        detail = str(exc) if settings.expose_errors else "Something went wrong"
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "error": "Internal Server Error",
                "message": detail,
            },
        )

    return app

"""
검사결과지 설명 HTTP 서버 (Starlette, 기본 포트 3001)

- GET  /health                 : 상태 확인
- POST /api/extract-pdf-text   : PDF(multipart 'pdf') → 정제된 텍스트
- POST /api/analyze            : PDF 또는 텍스트 → 판정 + 설명 + 설명 페이지가 덧붙은 PDF(base64)

동기 파이프라인/LLM/렌더러 호출은 run_in_threadpool 로 워커 스레드에서 실행합니다.
"""
from __future__ import annotations

import base64
import logging
from datetime import datetime, timezone
from typing import Optional, Tuple

import uvicorn
from starlette.applications import Starlette
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from labexplain.api.runtime import setup_logging
from labexplain.services.lab_report.errors import (
    EmptyOrTooShortText,
    ExtractionFailure,
    SummarizationError,
)
from labexplain.services.lab_report.pipeline import LabReportAnalysis, LabReportPipeline
from labexplain.services.rendering import PdfReportRenderer
from labexplain.services.summarization import LabReportSummarizer
from labexplain.settings import settings, validate_settings

logger = logging.getLogger(__name__)

DEFAULT_FILE_NAME = "analyse_avencio.pdf"


class BadRequest(Exception):
    """요청 형식 오류 (400)"""


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"success": False, "error": message}, status_code=status_code)


async def _read_upload(request: Request) -> Tuple[Optional[bytes], Optional[str], Optional[str]]:
    """요청에서 (PDF 바이트, 파일명, 텍스트) 추출

    multipart/form-data 의 'pdf' 파일과 'text' 필드, 또는 JSON {"text": ...} 를 지원합니다.
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            body = await request.json()
        except ValueError as exc:
            raise BadRequest("Invalid JSON body") from exc
        text = body.get("text") if isinstance(body, dict) else None
        return None, None, text if isinstance(text, str) else None

    if not (content_type.startswith("multipart/form-data") or content_type.startswith("application/x-www-form-urlencoded")):
        return None, None, None

    form = await request.form()
    upload = form.get("pdf")
    text = form.get("text")
    pdf_bytes = None
    file_name = None
    if isinstance(upload, UploadFile):
        pdf_bytes = await upload.read()
        file_name = upload.filename
        limit = settings.max_upload_size_mb * 1024 * 1024
        if len(pdf_bytes) > limit:
            raise BadRequest(f"File too large (max {settings.max_upload_size_mb} MB)")
    return pdf_bytes, file_name, text if isinstance(text, str) else None


def _get_pipeline(request: Request) -> LabReportPipeline:
    return request.app.state.pipeline


async def health(_request: Request) -> JSONResponse:
    return JSONResponse({"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()})


async def extract_pdf_text(request: Request) -> JSONResponse:
    try:
        pdf_bytes, file_name, _ = await _read_upload(request)
    except BadRequest as exc:
        return _error(str(exc), 400)
    if not pdf_bytes:
        return _error("No PDF file provided", 400)

    logger.info("PDF 텍스트 추출 요청: file=%s, bytes=%d", file_name, len(pdf_bytes))
    try:
        extracted = await run_in_threadpool(_get_pipeline(request).extract_text, pdf_bytes)
    except ExtractionFailure as exc:
        logger.warning("PDF 텍스트 추출 실패: %s", exc)
        return _error(str(exc), 422)

    return JSONResponse({
        "success": True,
        "text": extracted.text,
        "metadata": {"pages": extracted.pages, "textLength": len(extracted.text)},
    })


def _summarize_and_render(
    request: Request,
    analysis: LabReportAnalysis,
    pdf_bytes: Optional[bytes],
) -> Tuple[str, Optional[str]]:
    summarizer: LabReportSummarizer = request.app.state.summarizer
    renderer: PdfReportRenderer = request.app.state.renderer

    explanation = summarizer.summarize(analysis.text, analysis.records)
    file_base64 = None
    if pdf_bytes:
        rendered = renderer.render(
            explanation,
            analysis.records,
            original_pdf=pdf_bytes,
            date_label=analysis.report_date_label,
        )
        file_base64 = base64.b64encode(rendered).decode("ascii")
    return explanation, file_base64


async def analyze(request: Request) -> JSONResponse:
    try:
        pdf_bytes, file_name, text = await _read_upload(request)
    except BadRequest as exc:
        return _error(str(exc), 400)

    pipeline = _get_pipeline(request)
    try:
        if pdf_bytes:
            logger.info("PDF 분석 요청: file=%s, bytes=%d", file_name, len(pdf_bytes))
            analysis = await run_in_threadpool(pipeline.analyze_pdf, pdf_bytes)
            file_name = f"analyse_{file_name or 'document.pdf'}"
        elif text and text.strip():
            analysis = await run_in_threadpool(pipeline.analyze_text, text)
            file_name = DEFAULT_FILE_NAME
        else:
            return _error("No text to analyze", 400)

        explanation, file_base64 = await run_in_threadpool(_summarize_and_render, request, analysis, pdf_bytes)
    except EmptyOrTooShortText as exc:
        logger.info("분석 거부 (텍스트 부족): %s", exc)
        return _error("Extracted text too short or empty", 400)
    except ExtractionFailure as exc:
        logger.warning("PDF 파싱 실패: %s", exc)
        return _error(str(exc), 422)
    except SummarizationError as exc:
        return _error(str(exc), 502)

    envelope = analysis.to_envelope()
    return JSONResponse({
        "success": True,
        "analysis": explanation,
        "records": envelope.data.records,
        "fileBase64": file_base64,
        "fileName": file_name,
    })


async def _unhandled_error(_request: Request, exc: Exception) -> JSONResponse:
    logger.exception("처리되지 않은 서버 오류", exc_info=exc)
    return _error(str(exc) or "Analysis failed", 500)


def create_app(
    pipeline: Optional[LabReportPipeline] = None,
    summarizer: Optional[LabReportSummarizer] = None,
    renderer: Optional[PdfReportRenderer] = None,
) -> Starlette:
    """Starlette 앱 생성 (미지정 의존성은 설정값으로 생성)"""
    if pipeline is None:
        pipeline = LabReportPipeline.create_with_deps()
    if summarizer is None:
        from labexplain.services.llm.factory import get_llm_service
        summarizer = LabReportSummarizer(get_llm_service())
    if renderer is None:
        renderer = PdfReportRenderer()

    routes = [
        Route("/health", endpoint=health, methods=["GET"]),
        Route("/api/extract-pdf-text", endpoint=extract_pdf_text, methods=["POST"]),
        Route("/api/analyze", endpoint=analyze, methods=["POST"]),
    ]
    middleware = [Middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])]

    app = Starlette(
        debug=settings.app_debug,
        routes=routes,
        middleware=middleware,
        exception_handlers={Exception: _unhandled_error},
    )
    app.state.pipeline = pipeline
    app.state.summarizer = summarizer
    app.state.renderer = renderer
    return app


def main() -> None:
    setup_logging(level=settings.log_level)
    for key, message in validate_settings().items():
        logger.warning("설정 경고 [%s]: %s", key, message)

    logger.info("🚀 검사결과지 설명 서버 시작 중...")
    logger.info(f"🌐 서버 주소: http://{settings.server_host}:{settings.server_port} (Health: /health)")
    uvicorn.run(create_app(), host=settings.server_host, port=settings.server_port)


if __name__ == "__main__":
    main()

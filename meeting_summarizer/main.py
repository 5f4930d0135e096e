import logging
import time
from typing import Optional

from fastapi import Depends, FastAPI, File, Form, HTTPException, Request, Response, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile as StarletteUploadFile
from starlette.exceptions import HTTPException as StarletteHTTPException

from meeting_summarizer.api.dependencies import form_state, get_mailer, get_text_generator
from meeting_summarizer.core.config import ALLOWED_ORIGINS, HOST, MAX_UPLOAD_MB, PORT
from meeting_summarizer.core.errors import (
    EMAIL_FAILED,
    INVALID_BODY,
    SUMMARY_FAILED,
    http_exception_handler,
    request_validation_handler,
)
from meeting_summarizer.core.logging import new_request_id, setup_logging
from meeting_summarizer.core.templates import templates
from meeting_summarizer.schemas.email import SendEmailRequest, SendEmailResponse
from meeting_summarizer.schemas.summarize import HealthResponse, SummarizeRequest, SummarizeResponse
from meeting_summarizer.services.email_dispatch import compose_email, dispatch_email
from meeting_summarizer.services.ingest import UploadTooLarge, ingest, read_upload_text
from meeting_summarizer.services.llm_client import TextGenerator
from meeting_summarizer.services.mailer import Mailer
from meeting_summarizer.services.markdown import render_markdown
from meeting_summarizer.services.summarizer import summarize_transcript
from meeting_summarizer.ui import state as ui

setup_logging()
logger = logging.getLogger(__name__)

_STARTED_AT = time.monotonic()

app = FastAPI(title="Meeting Notes Summarizer", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, request_validation_handler)


def _max_upload_bytes() -> int:
    return MAX_UPLOAD_MB * 1024 * 1024


async def _generate_summary(
    upload: Optional[StarletteUploadFile],
    transcript: Optional[str],
    prompt: Optional[str],
    generator: TextGenerator,
    request_id: str,
) -> str:
    # 1) Read file (if provided) + enforce size limit
    file_text = None
    if upload is not None:
        try:
            file_text = await read_upload_text(upload, _max_upload_bytes())
        except UploadTooLarge as e:
            raise HTTPException(status_code=413, detail=str(e))
        except Exception:
            logger.exception(f"[{request_id}] upload_read_error")
            raise HTTPException(status_code=500, detail=SUMMARY_FAILED)

    # 2) Combine + validate
    try:
        text = ingest(text=transcript, file_text=file_text)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    logger.info(f"[{request_id}] transcript_ready chars={len(text)} file={file_text is not None}")

    # 3) Generate
    try:
        return await run_in_threadpool(summarize_transcript, text, prompt, generator, request_id)
    except Exception:
        logger.exception(f"[{request_id}] summarizer_error")
        raise HTTPException(status_code=500, detail=SUMMARY_FAILED)


async def _send_summary_email(to, subject: Optional[str], body: Optional[str], mailer: Mailer, request_id: str) -> str:
    try:
        message = compose_email(to, subject, body)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    try:
        return await run_in_threadpool(dispatch_email, message, mailer, request_id)
    except Exception:
        logger.exception(f"[{request_id}] email_error")
        raise HTTPException(status_code=500, detail=EMAIL_FAILED)


@app.get("/api/health", response_model=HealthResponse)
def health():
    return HealthResponse(ok=True, uptime=time.monotonic() - _STARTED_AT)


# -------------------------
# API Layer (JSON endpoints)
# -------------------------
@app.post("/api/summarize", response_model=SummarizeResponse)
async def summarize(
    request: Request,
    response: Response,
    generator: TextGenerator = Depends(get_text_generator),
):
    """
    Accepts multipart/form-data (`file`, `transcript`, `prompt`) or a JSON body
    `{transcript, prompt}`.
    """
    request_id = new_request_id()
    response.headers["X-Request-Id"] = request_id

    upload = None
    if request.headers.get("content-type", "").startswith("application/json"):
        try:
            payload = SummarizeRequest.model_validate(await request.json())
        except (ValueError, ValidationError):
            raise HTTPException(status_code=400, detail=INVALID_BODY)
        transcript, prompt = payload.transcript, payload.prompt
    else:
        form = await request.form()
        transcript = form.get("transcript")
        prompt = form.get("prompt")
        file = form.get("file")
        if isinstance(file, StarletteUploadFile) and file.filename:
            upload = file
        transcript = transcript if isinstance(transcript, str) else None
        prompt = prompt if isinstance(prompt, str) else None

    logger.info(f"[{request_id}] /api/summarize START chars={len(transcript or '')} file={upload is not None}")
    summary = await _generate_summary(upload, transcript, prompt, generator, request_id)
    logger.info(f"[{request_id}] /api/summarize END")
    return SummarizeResponse(summary=summary)


@app.post("/api/send-email", response_model=SendEmailResponse)
async def send_email(
    response: Response,
    req: Optional[SendEmailRequest] = None,
    mailer: Mailer = Depends(get_mailer),
):
    request_id = new_request_id()
    response.headers["X-Request-Id"] = request_id

    req = req or SendEmailRequest()
    message_id = await _send_summary_email(req.to, req.subject, req.body, mailer, request_id)
    return SendEmailResponse(ok=True, messageId=message_id)


# -------------------------
# UI Layer (HTML frontend)
# -------------------------
def _render_ui(request: Request, state: ui.FormState):
    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "state": state,
            "preview_html": render_markdown(state.editable_summary) if state.summary else "",
        },
    )


@app.get("/")
def ui_home(request: Request):
    return _render_ui(request, ui.FormState())


@app.post("/ui/summarize")
async def ui_summarize(
    request: Request,
    state: ui.FormState = Depends(form_state),
    editable_summary: str = Form(""),
    file: UploadFile | None = File(default=None),
    generator: TextGenerator = Depends(get_text_generator),
):
    state = ui.edit_summary(state, editable_summary)

    upload = None
    if file is not None and file.filename:
        state = ui.select_file(state, file.filename, file.content_type)
        if not state.file_name:
            await file.close()
            return _render_ui(request, state)
        upload = file

    state = ui.start_summary(state)
    if not state.is_loading:
        return _render_ui(request, state)

    request_id = new_request_id()
    try:
        summary = await _generate_summary(upload, state.transcript, state.prompt, generator, request_id)
    except HTTPException as e:
        return _render_ui(request, ui.summary_failed(state, str(e.detail)))

    return _render_ui(request, ui.summary_succeeded(state, summary))


@app.post("/ui/preview")
def ui_preview(
    request: Request,
    state: ui.FormState = Depends(form_state),
    editable_summary: str = Form(""),
):
    return _render_ui(request, ui.edit_summary(state, editable_summary))


@app.post("/ui/send-email")
async def ui_send_email(
    request: Request,
    state: ui.FormState = Depends(form_state),
    editable_summary: str = Form(""),
    mailer: Mailer = Depends(get_mailer),
):
    state = ui.start_email(ui.edit_summary(state, editable_summary))
    if not state.is_email_sending:
        return _render_ui(request, state)

    request_id = new_request_id()
    try:
        await _send_summary_email(state.recipients, state.subject, state.editable_summary, mailer, request_id)
    except HTTPException as e:
        return _render_ui(request, ui.email_failed(state, str(e.detail)))

    return _render_ui(request, ui.email_succeeded(state))


@app.post("/ui/clear")
def ui_clear(request: Request):
    return _render_ui(request, ui.clear_all())


def run() -> None:
    import uvicorn

    uvicorn.run("meeting_summarizer.main:app", host=HOST, port=PORT)


if __name__ == "__main__":
    run()

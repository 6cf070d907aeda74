from __future__ import annotations

import logging

from fastapi import FastAPI, File, Form, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse

from egov_viewer.config import load_settings
from egov_viewer.history import HistoryStore
from egov_viewer.pipeline import ConversionResult, convert_files
from egov_viewer.rendering import generate_html

logger = logging.getLogger(__name__)

app = FastAPI(title="e-Gov Viewer API")


@app.middleware("http")
async def api_prefix_alias(request, call_next):
    """Accept both `/path` and `/api/path` for frontend compatibility."""
    if request.scope.get("path", "").startswith("/api/"):
        request.scope["path"] = request.scope["path"][4:]
    return await call_next(request)


app.add_middleware(
    CORSMiddleware,
    allow_origins=load_settings().cors_allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _history_store() -> HistoryStore:
    settings = load_settings()
    return HistoryStore(settings.history_path, settings.history_limit)


def _failure_response(result: ConversionResult) -> JSONResponse:
    return JSONResponse(
        status_code=422 if result.status == "empty" else 500,
        content={
            "status": result.status,
            "message": result.message,
            "warnings": result.warnings,
        },
    )


def _not_found(folder_name: str) -> JSONResponse:
    return JSONResponse(
        status_code=404,
        content={
            "status": "error",
            "message": f"History entry '{folder_name}' not found.",
            "warnings": [],
        },
    )


async def _read_uploads(files: list[UploadFile]) -> list[tuple[str, bytes]]:
    return [(upload.filename or "", await upload.read()) for upload in files]


@app.get("/health")
def health_check():
    return {"status": "ok"}


@app.get("/config")
def viewer_config():
    return load_settings().to_dict()


@app.post("/convert")
async def convert_upload(
    files: list[UploadFile] = File(...),
    folder_name: str = Form(""),
    store_history: bool = Form(True),
):
    result = convert_files(await _read_uploads(files))
    if result.status != "success":
        return _failure_response(result)

    if store_history:
        _history_store().add(folder_name, result.data)
    return HTMLResponse(content=result.html)


@app.post("/convert/data")
async def convert_upload_data(files: list[UploadFile] = File(...)):
    result = convert_files(await _read_uploads(files))
    if result.status == "error":
        return _failure_response(result)
    return result.to_dict()


@app.get("/history")
def list_history():
    return {"entries": [entry.summary() for entry in _history_store().entries()]}


@app.get("/history/{folder_name}")
def get_history_entry(folder_name: str):
    entry = _history_store().get(folder_name)
    if entry is None:
        return _not_found(folder_name)
    return entry.to_dict()


@app.get("/history/{folder_name}/html")
def render_history_entry(folder_name: str):
    entry = _history_store().get(folder_name)
    if entry is None:
        return _not_found(folder_name)
    return HTMLResponse(content=generate_html(entry.data))


@app.delete("/history/{folder_name}")
def delete_history_entry(folder_name: str):
    if not _history_store().delete(folder_name):
        return _not_found(folder_name)
    logger.info("Deleted history entry '%s'.", folder_name)
    return {"status": "success", "message": f"History entry '{folder_name}' deleted.", "warnings": []}

# functions/solve-test/function_app.py
"""
Azure Function HTTP entry point for solving uploaded tests.
Core logic lives in solver.core.processor for reusability.

Endpoints:
    POST /api/solve-test   multipart form with an `image` file field, or the
                           raw file as the body with its Content-Type
    GET  /api/health       configuration check
"""

import json
import logging

import azure.functions as func

from solver.config import config
from solver.core.processor import DocumentProcessor

app = func.FunctionApp()

logging.getLogger().setLevel(config.log_level)

processor = DocumentProcessor()


def _json_response(body: dict, status_code: int = 200) -> func.HttpResponse:
    return func.HttpResponse(
        json.dumps(body, ensure_ascii=False),
        status_code=status_code,
        mimetype="application/json"
    )


def _read_upload(req: func.HttpRequest):
    """Return (bytes, media type, filename) from a multipart field or the raw body."""
    content_type = req.headers.get("Content-Type", "")

    if content_type.startswith("multipart/form-data"):
        upload = req.files.get("image")
        if upload is None:
            return None, None, None
        return upload.read(), upload.mimetype, upload.filename or "upload"

    body = req.get_body()
    if not body:
        return None, None, None
    filename = req.params.get("filename") or "upload"
    return body, content_type.split(";")[0].strip(), filename


async def handle_solve_request(req: func.HttpRequest) -> func.HttpResponse:
    """Solve the uploaded test and return answers as JSON."""
    file_bytes, mime_type, filename = _read_upload(req)

    if file_bytes is None:
        return _json_response({"success": False, "error": "No file provided"}, status_code=400)

    result = await processor.process_document(
        file_content=file_bytes,
        mime_type=mime_type,
        filename=filename
    )

    if result.success:
        logging.info(f"✓ {result.message}")
    else:
        logging.error(f"✗ {result.message}")

    return _json_response(result.to_response(), status_code=result.status_code)


def health_check() -> func.HttpResponse:
    is_valid, missing = config.validate()
    return _json_response({
        "status": "ok" if is_valid else "misconfigured",
        "missing": missing,
        "settings": config.describe(),
    })


@app.function_name(name="SolveTest")
@app.route(route="solve-test", methods=["POST"], auth_level=func.AuthLevel.ANONYMOUS)
async def solve_test(req: func.HttpRequest) -> func.HttpResponse:
    return await handle_solve_request(req)


@app.function_name(name="Health")
@app.route(route="health", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
def health(req: func.HttpRequest) -> func.HttpResponse:
    return health_check()

"""
HTTP entry point for the classification service.

Routes:
- GET /      -> service metadata in the standard envelope
- POST /     -> classify {"text": ...}
- OPTIONS *  -> CORS preflight (204)

Every response carries Access-Control-Allow-Origin: *.
"""

import json
import logging
from http import HTTPStatus
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, BackgroundTasks
from fastapi.responses import JSONResponse, Response
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..config import AppMetadata
from ..errors import MalformedRequest
from ..inference.service import ClassificationService
from ..storage.sink import PredictionSink


logger = logging.getLogger("blockthetweet.api")

PREFLIGHT_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
    "Access-Control-Max-Age": "86400",
}


def envelope(status_code: int, message: str, data: Optional[Dict[str, Any]] = None) -> JSONResponse:
    """Standard {statusCode, message[, data]} response."""
    body: Dict[str, Any] = {"statusCode": status_code, "message": message}
    if data is not None:
        body["data"] = data
    return JSONResponse(status_code=status_code, content=body)


def parse_classify_request(body: bytes) -> str:
    """
    Extract the text to classify from a POST / body.

    Raises:
        MalformedRequest: Body is empty, not JSON, not an object, or has no string "text"
    """
    if not body:
        raise MalformedRequest("empty request body")
    try:
        payload = json.loads(body)
    except ValueError as e:
        raise MalformedRequest(f"body is not valid JSON: {e}") from e

    if not isinstance(payload, dict):
        raise MalformedRequest("body must be a JSON object")
    text = payload.get("text")
    if not isinstance(text, str):
        raise MalformedRequest('"text" must be present and be a string')
    try:
        text.encode("utf-8")
    except UnicodeEncodeError as e:
        raise MalformedRequest(f'"text" is not valid UTF-8: {e}') from e
    return text


def create_app(
    service: ClassificationService,
    metadata: Optional[AppMetadata] = None,
    sink: Optional[PredictionSink] = None
) -> FastAPI:
    """
    Build the FastAPI application around an already-initialized service.

    Args:
        service: Classification service with its vocabulary, stemmer and model loaded
        metadata: Static metadata returned by GET /
        sink: Optional prediction sink, written after each response

    Returns:
        FastAPI app ready to be served
    """
    metadata = metadata or AppMetadata()
    app = FastAPI(title=metadata.name, version=metadata.version)
    app.state.service = service
    app.state.metadata = metadata
    app.state.sink = sink

    @app.middleware("http")
    async def cors(request: Request, call_next):
        if request.method == "OPTIONS":
            return Response(status_code=204, headers=PREFLIGHT_HEADERS)
        response = await call_next(request)
        response.headers["Access-Control-Allow-Origin"] = "*"
        return response

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        try:
            message = HTTPStatus(exc.status_code).phrase
        except ValueError:
            message = str(exc.detail)
        response = envelope(exc.status_code, message)
        if exc.headers:
            response.headers.update(exc.headers)
        return response

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        response = envelope(500, "Internal Server Error")
        response.headers["Access-Control-Allow-Origin"] = "*"
        return response

    @app.get("/")
    async def get_informations():
        """Service metadata."""
        return envelope(200, "success", metadata.to_dict())

    @app.post("/")
    async def post_classify_text(request: Request, background_tasks: BackgroundTasks):
        """Classify one text. Runs the blocking pipeline in the worker threadpool."""
        try:
            text = parse_classify_request(await request.body())
        except MalformedRequest as e:
            logger.warning("Bad request: %s", e)
            return envelope(400, "Bad Request")

        result = await run_in_threadpool(service.classify, text)

        if not result.ok:
            if sink is not None:
                background_tasks.add_task(
                    sink.write_log, "error", f"text_hash={result.content_hash} {result.failure}"
                )
            return envelope(500, "Internal Server Error")

        if sink is not None:
            background_tasks.add_task(sink.write_prediction, result.prediction)
        return JSONResponse(status_code=200, content=result.prediction.to_response_data())

    return app

"""
HTTP surface for concept generation.

Routes:
- GET  /health
- POST /api/generate-concept
- POST /api/remix-concept

Both POST routes take a JSON body and an ``Authorization: Bearer <token>``
header and return whatever ConceptRequestHandler decided, status code
included. The handler call blocks on the LLM request, so it runs in the
threadpool. A client that disconnects does not cancel that call: the
worker thread runs until the LLM request finishes or hits ``llm.timeout``.
"""

import json
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from conceptlab import __version__
from conceptlab.audience2concept.concept_service import create_concept_service
from conceptlab.audience2concept.request_handler import ConceptRequestHandler, HandlerResponse
from conceptlab.core.config import get_config_value
from conceptlab.core.logging_config import get_logger
from conceptlab.core.session import TokenIdentityProvider
from conceptlab.store.audience_store import JsonAudienceStore

logger = get_logger(__name__)


def _extract_auth_token(raw_request: Request) -> str:
    """Extract bearer token from Authorization header."""
    auth = raw_request.headers.get("authorization", "")
    if auth.lower().startswith("bearer "):
        return auth[7:].strip()
    return ""


async def _read_body(raw_request: Request):
    # An unreadable body becomes None, which fails schema validation after
    # authentication has been checked.
    try:
        return await raw_request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        logger.warning("Request body is not valid JSON")
        return None


def _to_response(result: HandlerResponse) -> JSONResponse:
    return JSONResponse(content=result.body, status_code=result.status_code)


def build_default_handler(audiences_file: Optional[str] = None, log_file: Optional[str] = None) -> ConceptRequestHandler:
    """
    Build a handler from configuration: LLM service, token sessions and a JSON audience store.
    """
    audiences_file = audiences_file or get_config_value("storage.audiences_file", "audiences.json")
    return ConceptRequestHandler(
        service=create_concept_service(log_file=log_file),
        identity_provider=TokenIdentityProvider.from_config(),
        ownership_checker=JsonAudienceStore(audiences_file)
    )


def create_app(handler: Optional[ConceptRequestHandler] = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        handler (ConceptRequestHandler, optional): Request handler; built from configuration if omitted

    Returns:
        FastAPI: The application
    """
    if handler is None:
        handler = build_default_handler()

    app = FastAPI(title="conceptlab", version=__version__)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    @app.post("/api/generate-concept")
    async def generate_concept(raw_request: Request):
        token = _extract_auth_token(raw_request)
        body = await _read_body(raw_request)
        result = await run_in_threadpool(handler.handle_generate, body, token)
        return _to_response(result)

    @app.post("/api/remix-concept")
    async def remix_concept(raw_request: Request):
        token = _extract_auth_token(raw_request)
        body = await _read_body(raw_request)
        result = await run_in_threadpool(handler.handle_remix, body, token)
        return _to_response(result)

    return app

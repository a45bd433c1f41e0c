from __future__ import annotations

import logging
from typing import Callable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse, Response

from featuregraph.core.errors import FeatureGraphError

log = logging.getLogger("featuregraph.api")

GRAPH_ERROR_STATUS = 422
INTERNAL_ERROR_BODY = {"error": "internal", "detail": "Internal Server Error"}


def graph_error_response(exc: FeatureGraphError) -> JSONResponse:
    return JSONResponse(status_code=GRAPH_ERROR_STATUS, content={"error": exc.code, "detail": str(exc)})


async def feature_graph_error_handler(request: Request, exc: FeatureGraphError) -> JSONResponse:
    """Rejected builds are client errors: the manifest or the feature list is wrong."""
    log.warning("Graph construction failed: %s path=%s code=%s", exc, request.url.path, exc.code)
    return graph_error_response(exc)


class GraphErrorMiddleware(BaseHTTPMiddleware):
    """Last line of defence for the graph API.

    Anything that escapes the routers becomes a 500 with the same
    ``{"error", "detail"}`` body as a rejected build. The traceback goes to
    the server log only.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)
        except FeatureGraphError as exc:
            return graph_error_response(exc)
        except Exception:
            log.exception("Unhandled error path=%s", request.url.path)
            return JSONResponse(status_code=500, content=INTERNAL_ERROR_BODY)

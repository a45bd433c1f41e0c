from __future__ import annotations

from fastapi import FastAPI

from featuregraph import __version__
from featuregraph.api.endpoints import graph, health
from featuregraph.api.middleware.error_shaping import GraphErrorMiddleware, feature_graph_error_handler
from featuregraph.core.errors import FeatureGraphError

app = FastAPI(
    title="Feature Graph API",
    version=__version__,
)

app.add_middleware(GraphErrorMiddleware)
app.add_exception_handler(FeatureGraphError, feature_graph_error_handler)

app.include_router(health.router)
app.include_router(graph.router)

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query
from starlette.responses import PlainTextResponse

from featuregraph.config import load_manifest
from featuregraph.core.errors import UnknownIdentifierError
from featuregraph.core.export import to_dot
from featuregraph.core.graph import ModuleGraph

router = APIRouter(prefix="/api/v1/graph", tags=["graph"])


def _graph(feature: Optional[List[str]]) -> ModuleGraph:
    builder = load_manifest().make_builder()
    return builder.build(feature or None)


@router.get("")
def get_graph(feature: Optional[List[str]] = Query(None)):
    graph = _graph(feature)
    return {**graph.to_dict(), "summary": graph.summary()}


@router.get("/order")
def get_order(feature: Optional[List[str]] = Query(None)):
    return {"order": _graph(feature).topological_order()}


@router.get("/dot", response_class=PlainTextResponse)
def get_dot(feature: Optional[List[str]] = Query(None)):
    return to_dot(_graph(feature))


@router.get("/targets/{name}")
def get_target(name: str):
    graph = _graph(None)
    try:
        target = graph.target(name)
    except UnknownIdentifierError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return {
        **target.to_dict(),
        "project": graph.project_of(name).name,
        "depends_on": graph.dependencies_of(name),
        "transitive_dependencies": graph.transitive_dependencies(name),
        "dependents": graph.dependents_of(name),
    }

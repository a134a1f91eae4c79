"""Node list and detail endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException, Query, Request

from dsim.api.schemas import NodeResponse, PaginatedNodeList
from dsim.api.serializers import serialize_node

router = APIRouter()


@router.get("/{session_id}", response_model=PaginatedNodeList)
def list_nodes(
    session_id: str,
    request: Request,
    infected: bool | None = Query(None),
    page: int = Query(1, ge=1),
    page_size: int = Query(500, ge=1, le=5000),
) -> dict[str, Any]:
    mgr = request.app.state.session_manager
    try:
        session = mgr.get_session(session_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Session '{session_id}' not found")

    nodes = list(session.world.nodes)
    if infected is not None:
        nodes = [n for n in nodes if n.infected == infected]

    total = len(nodes)
    start = (page - 1) * page_size
    page_nodes = nodes[start:start + page_size]

    return {
        "nodes": [serialize_node(n) for n in page_nodes],
        "total": total,
        "page": page,
        "page_size": page_size,
    }


@router.get("/{session_id}/{node_id}", response_model=NodeResponse)
def get_node(session_id: str, node_id: int, request: Request) -> dict[str, Any]:
    mgr = request.app.state.session_manager
    try:
        session = mgr.get_session(session_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Session '{session_id}' not found")

    try:
        node = session.world.node(node_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Node {node_id} not found")
    return serialize_node(node)

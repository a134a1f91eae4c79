"""Simulation session management endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import PlainTextResponse

from dsim.api.schemas import (
    CreateSessionRequest,
    SessionResponse,
    SessionSummary,
    StepRequest,
)
from dsim.api.serializers import serialize_session
from dsim.core.config import ConfigError, WorldConfig
from dsim.experiment.presets import get_preset

router = APIRouter()


def _get_session(request: Request, session_id: str):
    mgr = request.app.state.session_manager
    try:
        return mgr.get_session(session_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Session '{session_id}' not found")


@router.post("/sessions", response_model=SessionResponse)
def create_session(req: CreateSessionRequest, request: Request):
    mgr = request.app.state.session_manager

    config = None
    try:
        if req.preset:
            config = get_preset(req.preset)
            if req.config:
                config = config.with_overrides(**req.config)
        elif req.config:
            config = WorldConfig.from_dict(req.config)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc.args[0]))
    except (ConfigError, TypeError) as exc:
        raise HTTPException(status_code=422, detail=str(exc))

    session = mgr.create_session(config=config, name=req.name)
    return serialize_session(session)


@router.get("/sessions", response_model=list[SessionSummary])
def list_sessions(request: Request):
    mgr = request.app.state.session_manager
    return mgr.list_sessions()


@router.get("/sessions/{session_id}", response_model=SessionResponse)
def get_session(session_id: str, request: Request):
    return serialize_session(_get_session(request, session_id))


@router.delete("/sessions/{session_id}")
def delete_session(session_id: str, request: Request):
    mgr = request.app.state.session_manager
    try:
        mgr.delete_session(session_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Session '{session_id}' not found")
    return {"deleted": True}


@router.post("/sessions/{session_id}/step", response_model=SessionResponse)
def step_session(session_id: str, req: StepRequest, request: Request):
    mgr = request.app.state.session_manager
    try:
        session = mgr.step(session_id, req.n)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Session '{session_id}' not found")
    return serialize_session(session)


@router.post("/sessions/{session_id}/run", response_model=SessionResponse)
def run_session(session_id: str, request: Request):
    mgr = request.app.state.session_manager
    try:
        session = mgr.run_full(session_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Session '{session_id}' not found")
    return serialize_session(session)


@router.post("/sessions/{session_id}/reset", response_model=SessionResponse)
def reset_session(session_id: str, request: Request):
    mgr = request.app.state.session_manager
    try:
        session = mgr.reset_session(session_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Session '{session_id}' not found")
    return serialize_session(session)


@router.get("/sessions/{session_id}/log", response_class=PlainTextResponse)
def get_log(session_id: str, request: Request):
    """The session's record stream so far, as CSV text."""
    session = _get_session(request, session_id)
    return session.stream.getvalue()

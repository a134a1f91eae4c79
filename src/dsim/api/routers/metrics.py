"""Tick metrics endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException, Query, Request

from dsim.api.schemas import SummaryResponse, TimeSeriesResponse

router = APIRouter()


def _get_session(request: Request, session_id: str):
    mgr = request.app.state.session_manager
    try:
        return mgr.get_session(session_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Session '{session_id}' not found")


@router.get("/{session_id}/ticks")
def get_ticks(
    session_id: str,
    request: Request,
    from_tick: int = Query(0, ge=0),
    to_tick: int | None = Query(None),
) -> list[dict[str, Any]]:
    session = _get_session(request, session_id)
    exported = session.collector.export_for_visualization()
    return [
        m for m in exported
        if m["tick"] >= from_tick and (to_tick is None or m["tick"] < to_tick)
    ]


@router.get("/{session_id}/time-series/{field_name}", response_model=TimeSeriesResponse)
def get_time_series(session_id: str, field_name: str, request: Request):
    session = _get_session(request, session_id)
    collector = session.collector
    try:
        values = collector.get_time_series(field_name)
    except AttributeError:
        raise HTTPException(status_code=400, detail=f"Unknown metric field: '{field_name}'")

    return {
        "field": field_name,
        "ticks": collector.get_time_series("tick"),
        "values": values,
    }


@router.get("/{session_id}/summary", response_model=SummaryResponse)
def get_summary(session_id: str, request: Request):
    session = _get_session(request, session_id)
    history = session.collector.metrics_history
    if not history:
        return {
            "ticks_recorded": 0,
            "population_size": len(session.world),
            "final_infected": session.world.infected_count,
            "peak_infected": session.world.infected_count,
            "peak_tick": session.current_tick,
            "infected_fraction": session.world.infected_count / len(session.world),
        }

    peak = max(history, key=lambda m: m.infected_count)
    return {
        "ticks_recorded": len(history),
        "population_size": history[-1].population_size,
        "final_infected": history[-1].infected_count,
        "peak_infected": peak.infected_count,
        "peak_tick": peak.tick,
        "infected_fraction": round(history[-1].infected_fraction, 4),
    }

"""
Pydantic models for API request/response validation.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


# === Simulation ===

class CreateSessionRequest(BaseModel):
    config: dict[str, Any] | None = None
    preset: str | None = None
    name: str | None = None


class StepRequest(BaseModel):
    n: int = Field(1, ge=1)


class SessionSummary(BaseModel):
    id: str
    name: str
    status: str
    current_tick: int
    max_ticks: int
    population_size: int
    infected_count: int


class SessionResponse(SessionSummary):
    next_seed: int
    config: dict[str, Any]


# === Agents ===

class NodeResponse(BaseModel):
    id: int
    current_position: list[float]
    start_position: list[float]
    infectable: bool
    infected: bool
    infected_for: int
    reinfectable: bool
    max_travel: float
    max_speed: float
    distance_from_home: float


class PaginatedNodeList(BaseModel):
    nodes: list[NodeResponse]
    total: int
    page: int
    page_size: int


# === Metrics ===

class SummaryResponse(BaseModel):
    ticks_recorded: int
    population_size: int
    final_infected: int
    peak_infected: int
    peak_tick: int
    infected_fraction: float


class TimeSeriesResponse(BaseModel):
    field: str
    ticks: list[int]
    values: list[Any]


# === Experiments ===

class PresetInfo(BaseModel):
    name: str
    config: dict[str, Any]

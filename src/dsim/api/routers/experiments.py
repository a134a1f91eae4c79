"""Experiment-related endpoints: presets."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException

from dsim.api.schemas import PresetInfo
from dsim.experiment.presets import get_preset, list_presets

router = APIRouter()


@router.get("/presets", response_model=list[PresetInfo])
def get_presets():
    return [
        {"name": name, "config": get_preset(name).to_dict()}
        for name in list_presets()
    ]


@router.get("/presets/{name}", response_model=PresetInfo)
def get_preset_detail(name: str):
    try:
        config = get_preset(name)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Preset '{name}' not found")
    return {"name": name, "config": config.to_dict()}

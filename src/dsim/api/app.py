"""
FastAPI application factory for the dSim API.
"""

import os
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from dsim.api.routers import agents, experiments, metrics, simulation
from dsim.api.sessions import SessionManager

# Load .env from the project root first, then CWD
_project_root = Path(__file__).resolve().parents[3]  # src/dsim/api/app.py → project root
load_dotenv(_project_root / ".env")
load_dotenv(Path.cwd() / ".env")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    application = FastAPI(
        title="dSim API",
        description="REST API for stepping and inspecting dSim epidemic worlds",
        version="0.1.0",
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=os.environ.get("DSIM_CORS_ORIGINS", "*").split(","),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.state.session_manager = SessionManager()

    application.include_router(simulation.router, prefix="/api/simulation", tags=["simulation"])
    application.include_router(agents.router, prefix="/api/agents", tags=["agents"])
    application.include_router(metrics.router, prefix="/api/metrics", tags=["metrics"])
    application.include_router(experiments.router, prefix="/api/experiments", tags=["experiments"])

    @application.get("/api/health")
    def health_check():
        return {"status": "ok"}

    return application


app = create_app()

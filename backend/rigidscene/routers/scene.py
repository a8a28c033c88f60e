"""
Router: /scene - Scene programs

Evaluates scene programs, keeps the resulting world on the app's
SceneSession, and optionally steps it with the Matter.js worker.

Pipeline:
1. parse + normalize + evaluate program → Composite
2. hydrate Composite → engine world (replaces the previous world)
3. simulate world → frames (optional, /scene/simulate)
"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, Field

from rigidscene.examples import EXAMPLES
from rigidscene.lang.errors import SceneError
from rigidscene.lang.evaluator import run_program
from rigidscene.lang.grammar import PHYSICS_GRAMMAR
from rigidscene.models.settings import settings
from rigidscene.sim.world import SceneSession, WorldHandle, start

logger = logging.getLogger("scene")

router = APIRouter(prefix="/scene", tags=["scene"])


# ===========================
# Request/Response Models
# ===========================

class RunSceneRequest(BaseModel):
    """Request body for /scene/run."""

    program: str = Field(description="Scene program source")
    grammar: Optional[str] = Field(
        default=None,
        description="Replacement grammar (lark EBNF); defaults to the built-in grammar"
    )
    strict: Optional[bool] = Field(
        default=None,
        description="Reject constraints whose endpoints name no body (default: settings.STRICT_CONSTRAINTS)"
    )


class RunSceneResponse(BaseModel):
    """Hydrated world of a successful run."""

    status: str = Field(description="Status: 'started'")
    counts: dict[str, int] = Field(description="bodies / constraints / composites in the engine world")
    world: dict[str, Any] = Field(description="Engine world payload (gravity, bounds, world tree)")


class SimulateSceneRequest(RunSceneRequest):
    """Request body for /scene/simulate."""

    duration_s: float = Field(
        default=settings.SIM_DEFAULT_DURATION_S,
        gt=0,
        description="Simulation duration in seconds"
    )
    frame_rate: int = Field(
        default=settings.SIM_FRAME_RATE,
        gt=0,
        description="Frames per second"
    )


class SimulateSceneResponse(BaseModel):
    status: str = Field(description="Status: 'simulated'")
    counts: dict[str, int]
    simulation: dict[str, Any] = Field(description="Simulation results (frames, meta)")


class ExampleProgram(BaseModel):
    name: str
    program: str


# ===========================
# Helpers
# ===========================

def get_session(request: Request) -> SceneSession:
    """The app-wide session; created on first use."""
    session = getattr(request.app.state, "scene_session", None)
    if session is None:
        session = SceneSession()
        request.app.state.scene_session = session
    return session


def _scene_error(err: SceneError) -> HTTPException:
    logger.info(f"[scene] {err.code}: {err}")
    return HTTPException(status_code=400, detail=err.to_dict())


def _live_handle(request: Request) -> WorldHandle:
    handle = get_session(request).handle
    if handle is None or not handle.running:
        raise HTTPException(status_code=409, detail="No world is running. POST /scene/run first.")
    return handle


def _run_response(handle: WorldHandle) -> RunSceneResponse:
    return RunSceneResponse(status="started", counts=handle.summary(), world=handle.engine.to_payload())


# ===========================
# Endpoints
# ===========================

@router.get("/examples", response_model=list[ExampleProgram])
async def list_examples():
    return [ExampleProgram(name=name, program=program) for name, program in EXAMPLES.items()]


@router.get("/grammar")
async def get_grammar() -> dict[str, str]:
    return {"grammar": PHYSICS_GRAMMAR}


@router.post("/run", response_model=RunSceneResponse)
async def run_scene(body: RunSceneRequest, request: Request):
    """
    Evaluate a program and make its world the session's live world.

    A program that fails to parse or evaluate is reported with HTTP 400 and
    leaves the previous world running.
    """
    session = get_session(request)
    try:
        handle = session.run(body.program, grammar=body.grammar, strict=body.strict)
    except SceneError as err:
        raise _scene_error(err)

    logger.info(f"[scene] started world: {handle.summary()}")
    return _run_response(handle)


@router.post("/explode", response_model=RunSceneResponse)
async def explode_scene(request: Request):
    handle = _live_handle(request)
    handle.explode()
    return _run_response(handle)


@router.post("/rotate", response_model=RunSceneResponse)
async def rotate_scene(request: Request):
    handle = _live_handle(request)
    handle.rotate()
    return _run_response(handle)


@router.post("/simulate", response_model=SimulateSceneResponse)
async def simulate_scene(body: SimulateSceneRequest):
    """
    Evaluate a program into a throwaway world and step it with Matter.js.

    The session's live world is not touched.
    """
    try:
        scene = run_program(body.program, grammar=body.grammar)
        handle = start(scene, strict=body.strict)
    except SceneError as err:
        raise _scene_error(err)

    with handle:
        counts = handle.summary()
        try:
            simulation = handle.simulate(body.duration_s, body.frame_rate)
        except RuntimeError as e:
            logger.error(f"[scene] simulation failed: {e}")
            raise HTTPException(status_code=500, detail=f"Simulation failed: {e}")

    return SimulateSceneResponse(status="simulated", counts=counts, simulation=simulation)

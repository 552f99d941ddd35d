"""Car state REST endpoints.

Endpoints:
    GET /cars          : Full unrounded internal state of every car
    GET /cars/snapshot : Rounded snapshot, same shape as location:update
    GET /cars/route    : The loop's waypoints
    GET /cars/{car_id} : Unrounded state of a single car
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request

from carsim.simulation import SimulationEngine

router = APIRouter(prefix="/cars", tags=["cars"])


def _get_engine(request: Request) -> SimulationEngine:
    engine = getattr(request.app.state, "simulation_engine", None)
    if engine is None:
        raise HTTPException(status_code=503, detail="Simulation not running")
    return engine


@router.get("")
async def list_cars(request: Request):
    """Current state of every car, unrounded. Used for bootstrap and debugging."""
    return _get_engine(request).raw_state()


@router.get("/snapshot")
async def cars_snapshot(request: Request):
    return _get_engine(request).snapshot()


@router.get("/route")
async def cars_route(request: Request):
    return _get_engine(request).route.to_list()


@router.get("/{car_id}")
async def get_car(car_id: str, request: Request):
    state = _get_engine(request).car_state(car_id)
    if state is None:
        raise HTTPException(status_code=404, detail=f"Car not found: {car_id}")
    return state

"""CARSIM - synthetic real-time car GPS feed.

Main FastAPI application.
"""

import asyncio
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from app.config import settings
from app.routers import cars_router, ws_router
from app.routers.ws import ConnectionManager, start_feed_bridge
from carsim import __version__


# ---------------------------------------------------------------------------
# Subsystem startup helpers
# ---------------------------------------------------------------------------

def _create_simulation_engine():
    """Create the SimulationEngine for the default fleet. Returns engine or None."""
    if not settings.simulation_enabled:
        return None

    from carsim.comms.event_bus import EventBus
    from carsim.simulation import DEFAULT_ROUTE, SimulationEngine, build_default_fleet

    engine = SimulationEngine(
        DEFAULT_ROUTE,
        build_default_fleet(),
        event_bus=EventBus(),
        tick_interval=settings.tick_interval,
    )
    logger.info("Simulation engine created")
    return engine


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info("=" * 60)
    logger.info(f"  CARSIM v{__version__} - INITIALIZING")
    logger.info("=" * 60)

    connections = ConnectionManager()
    app.state.connections = connections

    sim_engine = _create_simulation_engine()
    bridge = None
    app.state.simulation_engine = sim_engine

    if sim_engine is not None:
        bridge = start_feed_bridge(
            sim_engine.event_bus, asyncio.get_running_loop(), connections
        )
        sim_engine.start()
        logger.info("Simulation engine + feed bridge started")
    else:
        logger.warning("Simulation disabled (SIMULATION_ENABLED=false)")

    logger.info("=" * 60)
    logger.info(f"  CARSIM ONLINE - fake real-time car GPS on port {settings.port}")
    logger.info("=" * 60)

    yield

    logger.info("CARSIM shutting down...")
    if sim_engine is not None:
        sim_engine.stop()
    if bridge is not None:
        bridge.stop()
    app.state.simulation_engine = None
    app.state.connections = None


# Create FastAPI app
app = FastAPI(
    title="CARSIM",
    description="Synthetic real-time car GPS feed",
    version=__version__,
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(cars_router)
app.include_router(ws_router)


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {
        "status": "operational",
        "version": __version__,
        "system": settings.app_name,
    }


@app.get("/api/status")
async def status():
    """System status endpoint."""
    engine = getattr(app.state, "simulation_engine", None)
    return {
        "name": settings.app_name,
        "version": __version__,
        "simulation": engine is not None and engine.is_running,
        "tick_interval": settings.tick_interval,
        "cars": len(engine.get_cars()) if engine is not None else 0,
        "ticks": engine.tick_count if engine is not None else 0,
    }


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()

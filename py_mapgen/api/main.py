"""FastAPI main application."""

import logging
from typing import Any, Dict, List, Optional

import structlog
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from ..config import settings
from ..config.terrain_presets import GenerationAlgorithm, TerrainType, list_presets
from ..core.errors import MapGenerationError, RoomCapacityError
from ..core.map_generator import MapGenerationOptions, generate_map

# Configure logging
logging.basicConfig(format="%(message)s", level=settings.log_level.upper())
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.JSONRenderer()
        if settings.log_format == "json"
        else structlog.dev.ConsoleRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()

API_VERSION = "0.1.0"

# Initialize FastAPI app
app = FastAPI(
    title="Map Generator API",
    description="Procedural room, corridor and cave maps for tabletop games",
    version=API_VERSION,
    debug=settings.debug,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[origin.strip() for origin in settings.allowed_origins.split(",")],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request/Response models
class MapGenerationRequest(BaseModel):
    """Request to generate a new map."""

    terrain: TerrainType = Field(TerrainType.DUNGEON, description="Terrain family")
    subtype: Optional[str] = Field(None, description="Terrain subtype, e.g. cottage or lava_tubes")
    story: Optional[str] = Field(None, description="House story, e.g. basement or story_1")
    algorithm: Optional[GenerationAlgorithm] = Field(None, description="Override the layout algorithm")
    seed: Optional[int] = Field(None, description="Seed for reproducible generation")
    width: Optional[int] = Field(None, ge=8, le=settings.max_map_width, description="Map width in cells")
    height: Optional[int] = Field(None, ge=8, le=settings.max_map_height, description="Map height in cells")

    number_of_rooms: Optional[int] = Field(None, ge=1, le=settings.max_room_count, description="Target room count")
    min_room_size: Optional[int] = Field(None, ge=3, description="Minimum room side")
    max_room_size: Optional[int] = Field(None, ge=3, description="Maximum room side")
    organic_factor: float = Field(0.0, ge=0.0, le=1.0, description="0 = geometric, 1 = very organic")
    corridor_width: Optional[int] = Field(None, ge=1, le=5, description="Corridor width in cells")
    room_spacing: Optional[int] = Field(None, ge=0, le=10, description="Cells kept free around rooms")
    organic_paths: Optional[bool] = Field(None, description="Winding paths instead of L-shaped corridors")

    fill_probability: float = Field(0.45, ge=0.0, le=1.0, description="Initial wall probability")
    roughness: float = Field(1.0, gt=0.0, le=3.0, description="Multiplier on fill probability")
    smooth_iterations: int = Field(4, ge=0, le=20, description="Automaton smoothing passes")
    wall_threshold: int = Field(5, ge=0, le=8, description="Wall neighbours needed to stay wall")

    coverage_percent: float = Field(15.0, ge=0.0, le=100.0, description="Share of cells the walk carves")
    resolution: int = Field(3, ge=1, le=6, description="Walk grid cells per map cell")
    direction_change_chance: float = Field(0.15, ge=0.0, le=1.0)
    wider_area_chance: float = Field(0.02, ge=0.0, le=1.0)
    min_steps_before_change: int = Field(3, ge=0)
    max_steps_before_change: int = Field(8, ge=0)

    include_grid: bool = Field(False, description="Return the occupancy grid (1 = wall)")


class MapResponse(BaseModel):
    """A generated map."""

    width: int
    height: int
    terrain: str
    subtype: Optional[str]
    algorithm: str
    seed: int
    rooms: List[Dict[str, Any]]
    corridors: List[Dict[str, Any]]
    entrance_exit: Optional[Dict[str, Any]]
    metadata: Dict[str, Any]
    grid: Optional[List[List[int]]] = None


# API endpoints
@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Map Generator API",
        "version": API_VERSION,
        "status": "running"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/terrains")
async def get_terrains():
    """List terrains, subtypes, house stories and default algorithms."""
    return list_presets()


@app.post("/maps/generate", response_model=MapResponse)
def generate(request: MapGenerationRequest):
    """
    Generate a map synchronously.

    The same request with the same seed always returns the same map.
    """
    params = request.model_dump(exclude={"include_grid"})
    params["terrain"] = request.terrain.value
    params["algorithm"] = request.algorithm.value if request.algorithm else None
    logger.info("Map generation requested", request=params)

    try:
        generated = generate_map(MapGenerationOptions(**params))
    except RoomCapacityError as e:
        logger.warning("Room count rejected", requested=e.requested, capacity=e.capacity)
        raise HTTPException(status_code=422, detail=str(e))
    except MapGenerationError as e:
        logger.warning("Map generation rejected", error=str(e))
        raise HTTPException(status_code=422, detail=str(e))

    return generated.to_dict(include_grid=request.include_grid)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)

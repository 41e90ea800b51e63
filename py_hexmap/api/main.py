"""FastAPI main application."""

import threading
import time
import uuid
from collections import OrderedDict
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import structlog
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field, ValidationError

from ..config import get_preset, list_presets, PRESETS, settings
from ..core.compatibility import describe_rules
from ..core.pipeline import GenerationResult, generate_terrain
from ..exceptions import InvalidDimensionsError
from ..export import grid_to_ascii, grid_to_rows, tile_statistics
from ..core.tiles import TILE_NAMES, TileType
from ..utils.logging import configure_logging

configure_logging(settings.log_level, settings.log_format)

logger = structlog.get_logger()

# Initialize FastAPI app
app = FastAPI(
    title="Hex Map Generator API",
    description="Procedural hex terrain for turn-based strategy maps",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class StoredMap:
    """A generated map kept in memory."""

    def __init__(self, map_id: str, preset: str, result: GenerationResult, seconds: float):
        self.id = map_id
        self.preset = preset
        self.result = result
        self.created_at = datetime.now(timezone.utc)
        self.generation_time_seconds = seconds


_maps: "OrderedDict[str, StoredMap]" = OrderedDict()
_maps_lock = threading.Lock()


def get_stored_map(map_id: str) -> StoredMap:
    with _maps_lock:
        stored = _maps.get(map_id)
    if stored is None:
        raise HTTPException(status_code=404, detail="Map not found")
    return stored


def store_map(stored: StoredMap) -> None:
    """Keep a map, evicting the oldest ones beyond ``settings.max_stored_maps``."""
    with _maps_lock:
        _maps[stored.id] = stored
        while len(_maps) > settings.max_stored_maps:
            evicted, _ = _maps.popitem(last=False)
            logger.info("Evicted stored map", map_id=evicted)


def clear_maps() -> None:
    with _maps_lock:
        _maps.clear()


# Request/Response models
class MapGenerationRequest(BaseModel):
    """Request to generate a new map."""

    width: Optional[int] = Field(None, description="Columns (defaults to settings)")
    height: Optional[int] = Field(None, description="Rows (defaults to settings)")
    preset: Optional[str] = Field(None, description="Preset name")
    seed: Optional[int] = Field(None, ge=0, description="Seed applied to every stage")
    config: Dict[str, Any] = Field(
        default_factory=dict, description="GenerationConfig overrides (snake_case or camelCase)"
    )


class RiverInfo(BaseModel):
    """Information about a river."""

    id: int
    source: List[int]
    target: List[int]
    length: int
    carved_cells: int


class MapSummary(BaseModel):
    """Summary information about a generated map."""

    id: str
    preset: str
    width: int
    height: int
    seeds: Dict[str, int]
    stats: Dict[str, Any]
    created_at: datetime
    generation_time_seconds: float


class MapTiles(BaseModel):
    """Full tile grid of a map."""

    id: str
    width: int
    height: int
    legend: Dict[int, str]
    tiles: List[List[int]]
    rivers: List[RiverInfo]


class MapStatistics(BaseModel):
    """Tile distribution of a generated map."""

    map_id: str
    total_cells: int
    land_cells: int
    water_cells: int
    land_fraction: float
    counts: Dict[str, int]
    fractions: Dict[str, float]
    rivers_count: int
    lakes_count: int


def _summary(stored: StoredMap) -> MapSummary:
    result = stored.result
    return MapSummary(
        id=stored.id,
        preset=stored.preset,
        width=result.width,
        height=result.height,
        seeds=result.seeds,
        stats=result.stats,
        created_at=stored.created_at,
        generation_time_seconds=stored.generation_time_seconds,
    )


# API endpoints
@app.get("/")
async def root():
    """Root endpoint."""
    return {"message": "Hex Map Generator API", "version": "0.1.0", "status": "running"}


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    with _maps_lock:
        stored = len(_maps)
    return {"status": "healthy", "maps_stored": stored}


@app.get("/presets")
async def get_presets():
    """Available presets and the fields each one overrides."""
    return {
        "default_preset": settings.default_preset,
        "presets": {name: PRESETS[name] for name in list_presets()},
    }


@app.get("/compatibility-rules")
async def get_compatibility_rules():
    """Allowed-neighbor table used by the relaxation pass."""
    return describe_rules()


@app.post("/maps/generate", response_model=MapSummary)
def generate_map(request: MapGenerationRequest):
    """Generate a map synchronously and keep it in memory."""
    logger.info("Map generation requested", request=request.model_dump())

    width = request.width if request.width is not None else settings.default_map_width
    height = request.height if request.height is not None else settings.default_map_height
    if width > settings.max_map_width or height > settings.max_map_height:
        raise HTTPException(
            status_code=400,
            detail=(
                f"Map too large: {width}x{height} exceeds "
                f"{settings.max_map_width}x{settings.max_map_height}"
            ),
        )

    preset = request.preset or settings.default_preset
    try:
        config = get_preset(preset, request.config)
        if request.seed is not None:
            config = config.with_seed(request.seed)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e.args[0]))
    except ValidationError as e:
        raise HTTPException(
            status_code=422, detail=e.errors(include_url=False, include_context=False)
        )

    started = time.perf_counter()
    try:
        result = generate_terrain(width, height, config)
    except InvalidDimensionsError as e:
        raise HTTPException(status_code=422, detail=str(e))
    elapsed = time.perf_counter() - started

    map_id = str(uuid.uuid4())
    stored = StoredMap(map_id, preset, result, round(elapsed, 3))
    store_map(stored)

    logger.info("Map generated", map_id=map_id, seconds=stored.generation_time_seconds)
    return _summary(stored)


@app.get("/maps", response_model=List[MapSummary])
async def list_maps():
    """List generated maps."""
    with _maps_lock:
        stored = list(_maps.values())
    return [_summary(s) for s in stored]


@app.get("/maps/{map_id}", response_model=MapTiles)
async def get_map(map_id: str):
    """Get the tile rows of a map."""
    stored = get_stored_map(map_id)
    result = stored.result
    return MapTiles(
        id=stored.id,
        width=result.width,
        height=result.height,
        legend={int(tile): TILE_NAMES[tile] for tile in TileType},
        tiles=grid_to_rows(result.grid),
        rivers=[
            RiverInfo(
                id=r.id,
                source=list(r.source),
                target=list(r.target),
                length=r.length,
                carved_cells=r.carved_cells,
            )
            for r in result.rivers
        ],
    )


@app.get("/maps/{map_id}/statistics", response_model=MapStatistics)
async def get_map_statistics(map_id: str):
    """Get tile distribution statistics for a map."""
    stored = get_stored_map(map_id)
    stats = tile_statistics(stored.result.grid)
    return MapStatistics(
        map_id=stored.id,
        total_cells=stats["total_cells"],
        land_cells=stats["land_cells"],
        water_cells=stats["water_cells"],
        land_fraction=stats["land_fraction"],
        counts=stats["counts"],
        fractions=stats["fractions"],
        rivers_count=stored.result.stats.get("rivers", 0),
        lakes_count=stored.result.stats.get("lakes", 0),
    )


@app.delete("/maps/{map_id}")
async def delete_map(map_id: str):
    """Remove a map from memory."""
    with _maps_lock:
        stored = _maps.pop(map_id, None)
    if stored is None:
        raise HTTPException(status_code=404, detail="Map not found")
    logger.info("Map deleted", map_id=map_id)
    return {"map_id": map_id, "deleted": True}


@app.get("/maps/{map_id}/ascii")
async def get_map_ascii(map_id: str):
    """ASCII preview of a map."""
    stored = get_stored_map(map_id)
    return {"map_id": stored.id, "ascii": grid_to_ascii(stored.result.grid)}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.api_host, port=settings.api_port)

"""FastAPI main application."""

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
from typing import Dict, List, Optional, Tuple
import structlog

from ..config import configure_logging, get_layer_preset, list_layer_presets, settings
from ..core.decorations import ExhaustionPolicy, ScatterOptions
from ..core.errors import InvalidParameter, PlacementExhausted, UnsupportedLayerCount
from ..core.params import GenerationParams, LayerRole, TerrainExtent, TerrainLayer
from ..core.terrain_generator import TerrainData, TerrainGenerator, TerrainSession

# Configure logging
configure_logging(settings.log_level, settings.log_format)

logger = structlog.get_logger()

# Initialize FastAPI app
app = FastAPI(
    title="Procedural Terrain API",
    description="Deterministic height field, splatmap and decoration synthesis",
    version="0.1.0"
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Terrain of this API process; replaced on /terrain/regenerate
app.state.session = TerrainSession(
    TerrainGenerator(scatter_options=ScatterOptions(max_attempts_per_slot=settings.max_placement_attempts))
)


# Request/Response models
class LayerModel(BaseModel):
    """A terrain layer descriptor."""

    name: str
    color: Tuple[float, float, float] = Field((0.5, 0.5, 0.5), description="Albedo RGB in [0, 1]")
    tile_size: Tuple[float, float] = Field((18.0, 18.0), description="Texture tiling in world units")
    role: Optional[LayerRole] = Field(None, description="Weighting role of the layer")


class TerrainGenerationRequest(BaseModel):
    """Request to generate terrain."""

    seed: int = Field(default_factory=lambda: settings.default_seed, description="Random seed")
    width: float = Field(default_factory=lambda: settings.default_width, description="Terrain width")
    max_height: float = Field(default_factory=lambda: settings.default_max_height, description="Terrain max height")
    depth: float = Field(default_factory=lambda: settings.default_depth, description="Terrain depth")
    heightmap_resolution: int = Field(
        default_factory=lambda: settings.default_heightmap_resolution,
        le=settings.max_resolution,
        description="Heightmap samples per side",
    )
    alphamap_resolution: int = Field(
        default_factory=lambda: settings.default_alphamap_resolution,
        le=settings.max_resolution,
        description="Splatmap samples per side",
    )
    layer_preset: Optional[str] = Field(None, description="Named layer preset")
    layers: Optional[List[LayerModel]] = Field(None, description="Explicit layer list, overrides layer_preset")
    tree_count: int = Field(
        default_factory=lambda: settings.default_tree_count,
        le=settings.max_decorations,
        description="Exact number of trees",
    )
    grass_count: int = Field(
        default_factory=lambda: settings.default_grass_count,
        le=settings.max_decorations,
        description="Upper bound on grass patches",
    )
    base_elevation: float = Field(0.0, description="World y of the terrain origin")
    under_place_trees: bool = Field(False, description="Place fewer trees instead of failing when placement is exhausted")
    include_grids: bool = Field(False, description="Include heights and splatmap in the response")


class DecorationModel(BaseModel):
    kind: str
    position: Tuple[float, float, float]
    rotation: Tuple[float, float, float]
    scale: float


class TerrainSummary(BaseModel):
    """Summary statistics of generated terrain."""

    seed: int
    heightmap_resolution: int
    alphamap_resolution: int
    height_min: float
    height_max: float
    height_mean: float
    slope_max: float
    layer_coverage: Dict[str, float]
    tree_count: int
    grass_count: int


class TerrainResponse(BaseModel):
    """Generated terrain handed to engine glue."""

    summary: TerrainSummary
    layers: List[LayerModel]
    decorations: List[DecorationModel]
    heights: Optional[List[List[float]]] = None
    splatmap: Optional[List[List[List[float]]]] = None


def build_params(request: TerrainGenerationRequest) -> GenerationParams:
    """Translate an API request into GenerationParams."""
    if request.layers is not None:
        layers = [TerrainLayer(layer.name, tuple(layer.color), tuple(layer.tile_size), layer.role)
                  for layer in request.layers]
    else:
        preset = request.layer_preset or settings.default_layer_preset
        try:
            layers = get_layer_preset(preset)
        except KeyError:
            raise HTTPException(status_code=400, detail=f"Unknown layer preset: {preset}")

    return GenerationParams(
        seed=request.seed,
        extent=TerrainExtent(request.width, request.max_height, request.depth),
        heightmap_resolution=request.heightmap_resolution,
        alphamap_resolution=request.alphamap_resolution,
        layers=tuple(layers),
        tree_count=request.tree_count,
        grass_count=request.grass_count,
        base_elevation=request.base_elevation,
    )


def build_generator(request: TerrainGenerationRequest) -> TerrainGenerator:
    policy = ExhaustionPolicy.UNDER_PLACE if request.under_place_trees else ExhaustionPolicy.RAISE
    return TerrainGenerator(
        scatter_options=ScatterOptions(
            max_attempts_per_slot=settings.max_placement_attempts,
            on_exhausted=policy,
        )
    )


def layer_models(layers) -> List[LayerModel]:
    return [LayerModel(name=layer.name, color=layer.color, tile_size=layer.tile_size, role=layer.role)
            for layer in layers]


def terrain_response(terrain: TerrainData, include_grids: bool) -> TerrainResponse:
    return TerrainResponse(
        summary=TerrainSummary(**terrain.summary()),
        layers=layer_models(terrain.params.layers),
        decorations=[DecorationModel(**d.to_dict()) for d in terrain.decorations],
        heights=terrain.heights.to_list() if include_grids else None,
        splatmap=terrain.splatmap.to_list() if include_grids else None,
    )


def run_generation(generate, params: GenerationParams) -> TerrainData:
    """Run a generation callable and map core errors to HTTP errors."""
    try:
        return generate(params)
    except (InvalidParameter, UnsupportedLayerCount) as e:
        logger.warning("Rejected generation request", seed=params.seed, error=str(e))
        raise HTTPException(status_code=400, detail=str(e))
    except PlacementExhausted as e:
        logger.warning("Decoration placement exhausted", seed=params.seed, error=str(e))
        raise HTTPException(status_code=422, detail=str(e))


# API endpoints
@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Procedural Terrain API",
        "version": "0.1.0",
        "status": "running"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/layers", response_model=List[LayerModel])
async def get_layers(preset: str = "default"):
    """Get the layers of a named preset."""
    try:
        return layer_models(get_layer_preset(preset))
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Unknown layer preset: {preset}")


@app.get("/layers/presets", response_model=List[str])
async def get_layer_presets():
    """List layer preset names."""
    return list_layer_presets()


@app.post("/terrain/generate", response_model=TerrainResponse)
def generate_terrain(request: TerrainGenerationRequest):
    """
    Generate terrain without touching the session.

    Same request, same response: generation is a pure function of the
    request parameters.
    """
    logger.info("Terrain generation requested", seed=request.seed)
    params = build_params(request)
    terrain = run_generation(build_generator(request).generate, params)
    return terrain_response(terrain, request.include_grids)


@app.post("/terrain/regenerate", response_model=TerrainResponse)
def regenerate_terrain(request: TerrainGenerationRequest, http_request: Request):
    """Replace the session terrain with a freshly generated one."""
    session: TerrainSession = http_request.app.state.session
    logger.info("Terrain regeneration requested", seed=request.seed)
    params = build_params(request)
    generator = build_generator(request)
    terrain = run_generation(lambda p: session.regenerate(p, generator=generator), params)
    return terrain_response(terrain, request.include_grids)


@app.get("/terrain/current", response_model=TerrainResponse)
def get_current_terrain(http_request: Request, include_grids: bool = False):
    """Get the session terrain."""
    session: TerrainSession = http_request.app.state.session
    if session.terrain is None:
        raise HTTPException(status_code=404, detail="No terrain generated yet")
    return terrain_response(session.terrain, include_grids)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.api_host, port=settings.api_port)

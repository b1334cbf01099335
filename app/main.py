"""
Match Gateway - Main FastAPI Application
Games are held in memory; predictions and reference data are proxied LIVE
to the analytics service
"""
import logging
from contextlib import asynccontextmanager, contextmanager
from typing import Optional, List, Callable, Type

import uvicorn
from fastapi import APIRouter, Depends, FastAPI, Query, Request, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError

from app.analytics_client import AnalyticsClient, UpstreamResponse
from app.errors import (
    GatewayError,
    BadRequestError,
    ServiceUnavailableError,
    InternalError,
    UpstreamUnavailableError,
    UpstreamReadError,
    UpstreamParseError,
)
from app.registry import GameRegistry
from app.schemas import (
    Game,
    PredictionRequest,
    JobResponse,
    DataResponse,
    LeaguesResponse,
    TeamsResponse,
    MessageResponse,
)
from config.settings import Settings, settings

# Version tracking
APP_VERSION = "v0.1.0"
APP_NAME = "Match Gateway"

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
)
logger = logging.getLogger("gateway")

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}

ERROR_RESPONSES = {
    400: {"model": MessageResponse},
    500: {"model": MessageResponse},
    503: {"model": MessageResponse},
}

router = APIRouter()


# =============================================================================
# DEPENDENCIES
# =============================================================================

def get_game_registry(request: Request) -> GameRegistry:
    """Registry owned by the running application."""
    return request.app.state.games


def get_analytics_client(request: Request) -> AnalyticsClient:
    """Analytics client owned by the running application."""
    return request.app.state.analytics


def json_body(model: Type[BaseModel], message: str) -> Callable:
    """
    Build a dependency that decodes the raw request body into `model`.

    Any decode failure (invalid JSON, wrong shape, wrong field types) becomes
    a BadRequestError carrying `message`.
    """
    async def decode(request: Request) -> BaseModel:
        body = await request.body()
        try:
            return model.model_validate_json(body)
        except ValidationError as e:
            logger.debug(f"Rejected {request.method} {request.url.path} body: {e}")
            raise BadRequestError(message) from e

    return decode


def documented_body(model: Type[BaseModel]) -> dict:
    """OpenAPI request body for routes that decode through json_body."""
    return {
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": model.model_json_schema()}},
        }
    }


@contextmanager
def upstream_errors():
    """Translate analytics client failures into gateway errors."""
    try:
        yield
    except UpstreamUnavailableError as e:
        raise ServiceUnavailableError("Analytics API unavailable", error=str(e)) from e
    except UpstreamReadError as e:
        raise InternalError("Failed to read response") from e
    except UpstreamParseError as e:
        raise InternalError("Failed to parse response") from e


def relay(fetch: Callable[[], UpstreamResponse]) -> Response:
    """Call the analytics service and forward its status and body unchanged."""
    with upstream_errors():
        upstream = fetch()
    return Response(
        content=upstream.content,
        status_code=upstream.status_code,
        media_type=upstream.content_type,
    )


# =============================================================================
# SERVICE
# =============================================================================

@router.get("/health")
def health_check(games: GameRegistry = Depends(get_game_registry)):
    """Health check endpoint."""
    return {"status": "ok", "games": games.count}


@router.get("/version")
def version_info():
    """Version information endpoint."""
    return {
        "name": APP_NAME,
        "version": APP_VERSION,
        "full": f"{APP_NAME} {APP_VERSION}",
    }


# ===== GAMES =====

@router.get("/games", response_model=List[Game])
def list_games(games: GameRegistry = Depends(get_game_registry)):
    """Get all games in creation order."""
    return games.list()


@router.get("/games/{game_id}", response_model=Game, responses={404: {"model": MessageResponse}})
def get_game(game_id: str, games: GameRegistry = Depends(get_game_registry)):
    """Get game details by ID."""
    return games.get(game_id)


@router.post(
    "/games",
    response_model=Game,
    status_code=201,
    responses={400: {"model": MessageResponse}},
    openapi_extra=documented_body(Game),
)
def create_game(
    game: Game = Depends(json_body(Game, "Invalid request")),
    games: GameRegistry = Depends(get_game_registry),
):
    """
    Create a game from a JSON body.

    Callers are trusted: IDs are not checked for uniqueness and missing
    fields take their empty values.
    """
    created = games.add(game)
    logger.info(f"Created game id={created.id!r} ({games.count} total)")
    return created


# ===== PREDICTIONS =====

@router.post(
    "/predict",
    response_model=JobResponse,
    responses=ERROR_RESPONSES,
    openapi_extra=documented_body(PredictionRequest),
)
def start_prediction(
    prediction: PredictionRequest = Depends(json_body(PredictionRequest, "Invalid request format")),
    client: AnalyticsClient = Depends(get_analytics_client),
):
    """
    Start a prediction job on the analytics service.

    Every call starts a new upstream job. The upstream status code is kept.
    """
    with upstream_errors():
        status_code, job = client.start_prediction(prediction)
    return JSONResponse(
        status_code=status_code,
        content=job.to_dict(),
    )


@router.get("/jobs/{job_id}", response_model=JobResponse, responses=ERROR_RESPONSES)
def get_job_status(job_id: str, client: AnalyticsClient = Depends(get_analytics_client)):
    """Relay the analytics service's view of a prediction job."""
    return relay(lambda: client.get_job(job_id))


# ===== REFERENCE DATA =====

@router.get("/data/team", response_model=DataResponse, responses=ERROR_RESPONSES)
def get_team_data(
    team: str = Query("", description="Team name"),
    client: AnalyticsClient = Depends(get_analytics_client),
):
    """Historical data for a team."""
    if not team:
        raise BadRequestError("Team parameter is required")
    return relay(lambda: client.get_team_data(team))


@router.get("/data/next-game", response_model=DataResponse, responses=ERROR_RESPONSES)
def get_next_game_data(client: AnalyticsClient = Depends(get_analytics_client)):
    """Data for the next scheduled game."""
    return relay(client.get_next_game_data)


@router.get("/leagues", response_model=LeaguesResponse, responses=ERROR_RESPONSES)
def get_leagues(client: AnalyticsClient = Depends(get_analytics_client)):
    """Leagues available on the analytics service."""
    return relay(client.get_leagues)


@router.get("/teams", response_model=TeamsResponse, responses=ERROR_RESPONSES)
def get_teams(
    league: str = Query("", description="League name"),
    client: AnalyticsClient = Depends(get_analytics_client),
):
    """Teams for a league."""
    if not league:
        raise BadRequestError("League parameter is required")
    return relay(lambda: client.get_teams(league))


# =============================================================================
# APPLICATION
# =============================================================================

async def cors_middleware(request: Request, call_next):
    """Permissive CORS on every response; OPTIONS short-circuits with an empty 200."""
    if request.method == "OPTIONS":
        return Response(status_code=200, headers=CORS_HEADERS)
    response = await call_next(request)
    response.headers.update(CORS_HEADERS)
    return response


async def gateway_error_handler(request: Request, exc: GatewayError) -> JSONResponse:
    """Render a GatewayError as {"message": ...}."""
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def create_app(
    app_settings: Optional[Settings] = None,
    analytics_client: Optional[AnalyticsClient] = None,
) -> FastAPI:
    """
    Build the application with its own registry and analytics client.

    Args:
        app_settings: Settings to use (defaults to the environment-loaded ones)
        analytics_client: Client to use instead of one built from settings
    """
    app_settings = app_settings or settings
    client = analytics_client or AnalyticsClient(
        app_settings.analytics_api_url,
        timeout=app_settings.analytics_timeout_seconds,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Server started on :{app_settings.port}")
        logger.info(f"Proxying analytics requests to {client.base_url}")
        yield
        client.close()

    app = FastAPI(
        title=APP_NAME,
        description="In-memory games and a proxy to the prediction analytics API",
        version=APP_VERSION,
        lifespan=lifespan,
    )
    app.state.settings = app_settings
    app.state.games = GameRegistry()
    app.state.analytics = client

    app.middleware("http")(cors_middleware)
    app.add_exception_handler(GatewayError, gateway_error_handler)
    app.include_router(router)
    return app


app = create_app()


def run() -> None:
    """Serve the application with uvicorn on the configured host and port."""
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()

import fastapi
from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from bort.schemas.health import HealthResponse

async def root() -> PlainTextResponse:
    return PlainTextResponse("OK")

async def health_check() -> HealthResponse:
    return HealthResponse(status="ok")

def factory(app: fastapi.FastAPI) -> APIRouter:
    router = APIRouter()

    router.add_api_route(
        "/",
        root,
        methods=["GET"],
        response_class=PlainTextResponse,
        tags=["health"]
    )

    router.add_api_route(
        "/health/",
        health_check,
        methods=["GET"],
        response_model=HealthResponse,
        tags=["health"]
    )
    return router

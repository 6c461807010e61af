import logging

from fastapi import APIRouter, Request, Response

from app.config import get_settings
from app.models.response import EnvironmentResponse
from app.routers.common import ANY_METHOD
from app.services.environment import client_environment

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Environment"])


@router.api_route("/environment", methods=ANY_METHOD, summary="Detected client environment")
async def environment(request: Request) -> Response:
    """Report what the service detected about the caller, as pretty-printed JSON."""
    env = client_environment(request, get_settings())
    logger.info("Environment request", extra={"os": env.os, "browser": env.browser})

    report = EnvironmentResponse(
        os=env.os,
        browser=env.browser,
        country=env.country,
        city=env.city,
        user_agent=env.user_agent,
    )
    return Response(
        content=report.model_dump_json(indent=2, by_alias=True),
        media_type="application/json",
        headers={"cache-control": "no-cache"},
    )

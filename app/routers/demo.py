import logging

from fastapi import APIRouter, Request
from fastapi.responses import StreamingResponse
from slowapi import Limiter
from slowapi.util import get_remote_address

from app.config import get_settings
from app.routers.common import ANY_METHOD, HTML_MEDIA_TYPE
from app.services.environment import client_environment
from app.services.fetcher import load_demo_document
from app.services.os_metadata import os_profile
from app.services.personalizer import demo_rules, personalize

logger = logging.getLogger(__name__)

# Off unless SMART_DOCS_DEMO_RATE_LIMIT_ENABLED is set.
limiter = Limiter(key_func=get_remote_address, enabled=get_settings().demo_rate_limit_enabled)
router = APIRouter(tags=["Demo"])


@router.api_route("/demo", methods=ANY_METHOD, summary="Personalized remote demo page")
@router.api_route("/cloudflare-demo", methods=ANY_METHOD, include_in_schema=False)
@limiter.limit(get_settings().demo_rate_limit)
async def demo(request: Request) -> StreamingResponse:
    """Fetch the remote demo page and personalize it for the visitor.

    iOS visitors see the macOS sections and Android visitors the Linux ones.
    Indicator badges for other platforms are removed from the page.  When the
    remote page is unavailable the bundled fallback page is served with a
    ``200`` status.
    """
    settings = get_settings()
    env = client_environment(request, settings)
    profile = os_profile(env.os)
    logger.info(
        "Demo request for %s %s", profile.icon, profile.name, extra={"demo_url": settings.demo_url}
    )

    document = await load_demo_document(
        settings.demo_url, timeout=settings.fetch_timeout, max_size=settings.max_demo_size
    )
    return StreamingResponse(personalize(document, demo_rules(env.os)), media_type=HTML_MEDIA_TYPE)

import logging

from fastapi import APIRouter, Request
from fastapi.responses import StreamingResponse

from app.config import get_settings
from app.routers.common import ANY_METHOD, HTML_MEDIA_TYPE
from app.services.documents import documentation_document, silent_documentation_document
from app.services.environment import client_environment
from app.services.os_metadata import os_profile
from app.services.personalizer import documentation_rules, personalize, silent_rules

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Documentation"])


@router.api_route("/", methods=ANY_METHOD, summary="Personalized documentation")
@router.api_route("/index.html", methods=ANY_METHOD, include_in_schema=False)
async def documentation(request: Request) -> StreamingResponse:
    """Serve the documentation page with only the visitor's OS sections visible.

    With the ``visible`` policy the detected OS, browser and country are also
    written into ``<meta name="user-*">`` tags and the matching OS badge is
    marked ``active``.  The ``silent`` policy only hides sections.
    """
    settings = get_settings()
    env = client_environment(request, settings, default_country="US")
    profile = os_profile(env.os)
    logger.info(
        "Documentation request for %s %s",
        profile.icon,
        profile.name,
        extra={"os": env.os, "browser": env.browser, "policy": settings.personalization_policy},
    )

    if settings.personalization_policy == "silent":
        body = personalize(silent_documentation_document(), silent_rules(env.os))
    else:
        body = personalize(documentation_document(), documentation_rules(env))

    return StreamingResponse(body, media_type=HTML_MEDIA_TYPE)

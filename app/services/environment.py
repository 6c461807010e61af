from fastapi import Request

from app.config import Settings
from app.models.environment import ClientEnvironment
from app.services.classifier import classify_browser, classify_os

UNKNOWN = "unknown"


def client_environment(
    request: Request, settings: Settings, default_country: str = UNKNOWN
) -> ClientEnvironment:
    """Classify the client behind *request*.

    Missing headers are not errors: the User-Agent defaults to ``""`` and the
    geolocation headers to *default_country* and ``"unknown"``.
    """
    user_agent = request.headers.get("user-agent", "")
    return ClientEnvironment(
        os=classify_os(user_agent),
        browser=classify_browser(user_agent),
        country=request.headers.get(settings.country_header) or default_country,
        city=request.headers.get(settings.city_header) or UNKNOWN,
        user_agent=user_agent,
    )

from pydantic import BaseModel

from app.services.classifier import BrowserCategory, OSCategory


class ClientEnvironment(BaseModel):
    """Per-request view of the client, resolved once when the request arrives."""

    os: OSCategory
    browser: BrowserCategory
    country: str
    city: str
    user_agent: str


class OSProfile(BaseModel):
    """Display facts for one OS category."""

    os: str
    name: str
    icon: str
    shell: str
    package_manager: str
    config_dir: str

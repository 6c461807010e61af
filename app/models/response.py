from pydantic import BaseModel, ConfigDict, Field


class EnvironmentResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    os: str
    browser: str
    country: str
    city: str
    user_agent: str = Field(alias="userAgent")
    """Raw ``User-Agent`` header, empty when the client sent none."""

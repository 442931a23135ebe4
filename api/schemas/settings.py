"""
Pydantic schemas for the /settings endpoints.

The request body of PUT /settings/config is the Configuration model itself
(settings_store/configuration.py); these wrap it for responses.
"""

from api.schemas.job import CamelModel, DefaultResponse
from settings_store.configuration import Configuration


class ConfigResponse(DefaultResponse):
    message: str = "Configuration retrieval successful."
    config: Configuration


class TextureLimitUpdate(CamelModel):
    """Request body for PUT /settings/texture-limits/{index}."""

    value: int


class TextureLimitResponse(ConfigResponse):
    message: str = "Texture limit updated."
    accepted_value: int

"""
Settings endpoints.

GET    /settings/config              → current configuration
PUT    /settings/config              → replace it (all-or-nothing)
POST   /settings/texture-tiers       → append a texture tier
DELETE /settings/texture-tiers       → drop the last texture tier
PUT    /settings/texture-limits/{i}  → set one limit, clamped against its neighbours

A rejected PUT returns 422 with every violated field, and the stored
configuration stays exactly as it was.
"""

from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import get_settings_store, require_whitelisted
from api.schemas.job import DefaultResponse
from api.schemas.settings import ConfigResponse, TextureLimitResponse, TextureLimitUpdate
from models.errors import ValidationError
from settings_store.configuration import Configuration
from settings_store.store import SettingsStore

router = APIRouter(prefix="/settings", tags=["settings"], dependencies=[Depends(require_whitelisted)])


def _validation_error(e: ValidationError) -> HTTPException:
    return HTTPException(status_code=422, detail={"message": e.message, "errors": e.errors})


@router.get("/config", response_model=ConfigResponse)
def get_config(
    settings_store: SettingsStore = Depends(get_settings_store),
) -> ConfigResponse:
    return ConfigResponse(config=settings_store.get())


@router.put("/config", response_model=DefaultResponse)
def update_config(
    candidate: Configuration,
    settings_store: SettingsStore = Depends(get_settings_store),
) -> DefaultResponse:
    try:
        settings_store.apply(candidate)
    except ValidationError as e:
        raise _validation_error(e)
    return DefaultResponse(message="Configuration updated.")


@router.post("/texture-tiers", response_model=ConfigResponse)
def add_texture_tier(
    settings_store: SettingsStore = Depends(get_settings_store),
) -> ConfigResponse:
    try:
        config = settings_store.add_texture_tier()
    except ValidationError as e:
        raise _validation_error(e)
    return ConfigResponse(message="Texture tier added.", config=config)


@router.delete("/texture-tiers", response_model=ConfigResponse)
def remove_texture_tier(
    settings_store: SettingsStore = Depends(get_settings_store),
) -> ConfigResponse:
    removed = settings_store.remove_texture_tier()
    message = "Texture tier removed." if removed else "Only the greatest texture size is left."
    return ConfigResponse(message=message, config=settings_store.get())


@router.put("/texture-limits/{index}", response_model=TextureLimitResponse)
def set_texture_limit(
    index: int,
    update: TextureLimitUpdate,
    settings_store: SettingsStore = Depends(get_settings_store),
) -> TextureLimitResponse:
    try:
        accepted = settings_store.clamp_limit_at(index, update.value)
    except ValidationError as e:
        raise _validation_error(e)
    return TextureLimitResponse(accepted_value=accepted, config=settings_store.get())

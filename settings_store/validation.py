"""
Configuration validation and the "can I add this?" predicates.

The web form runs its own isAdd...Valid checks before editing a list, but
the client is untrusted: validate_configuration() re-checks every rule on
every write and collects ALL violations, so the caller gets field-level
detail for the whole candidate in one response.
"""

import logging
import re

from jobqueue.levels import LevelSpec, normalize_level, normalize_levels
from models.errors import ValidationError
from settings_store.configuration import Configuration, ImageCompressionLevel
from settings_store.texture_ladder import is_monotonic, is_texture_size

logger = logging.getLogger(__name__)

MAX_PORT = 65535
IMAGE_LEVEL_TITLE_PATTERN = re.compile(r"[A-Za-z0-9_\-]+")
# Title of the uncompressed original in the technical metadata
RESERVED_IMAGE_LEVEL_TITLE = "origin"


# ── Predicates (pure, no side effects) ──────────────────────────

def is_add_level_valid(levels: list[LevelSpec], candidate: LevelSpec) -> bool:
    try:
        new_level = normalize_level(candidate)
        existing = {normalize_level(level) for level in levels}
    except ValueError:
        return False
    return new_level not in existing


def is_add_whitelist_entry_valid(whitelist: list[str], entry: str) -> bool:
    trimmed = entry.strip()
    return trimmed != "" and trimmed not in (e.strip() for e in whitelist)


def is_valid_image_level_title(title: str) -> bool:
    return (
        IMAGE_LEVEL_TITLE_PATTERN.fullmatch(title) is not None
        and title.lower() != RESERVED_IMAGE_LEVEL_TITLE
    )


def is_add_image_compression_level_valid(
    levels: list[ImageCompressionLevel], candidate: ImageCompressionLevel
) -> bool:
    if not is_valid_image_level_title(candidate.title):
        return False
    if candidate.max_width < 1 or candidate.max_height < 1:
        return False
    return all(level.title != candidate.title for level in levels)


# ── Whole-configuration validation ──────────────────────────────

def validate_configuration(candidate: Configuration) -> Configuration:
    """
    Validate a candidate configuration as a whole.

    Returns a normalized copy (trimmed + de-duplicated whitelist, canonical
    level strings). Raises ValidationError listing every violation; nothing
    is ever partially applied.
    """
    errors: list[dict] = []

    def error(field: str, message: str) -> None:
        errors.append({"field": field, "message": message})

    # 1. API port
    if not 1 <= candidate.api_port <= MAX_PORT:
        error("apiPort", f"Port must be between 1 and {MAX_PORT}")

    # 2. Whitelist: trimmed, no blanks, de-duplicated, at least one entry
    whitelist: list[str] = []
    for index, entry in enumerate(candidate.api_access_whitelist):
        trimmed = entry.strip()
        if not trimmed:
            error(f"apiAccessWhitelist[{index}]", "Whitelist entries must not be blank")
        elif trimmed not in whitelist:
            whitelist.append(trimmed)
    if not candidate.api_access_whitelist:
        error("apiAccessWhitelist", "At least one whitelist entry is required")

    # 3. Default levels
    default_levels: list[str] = []
    try:
        default_levels = normalize_levels(candidate.default_levels, field="defaultLevels")
    except ValidationError as e:
        errors.extend(e.errors)
    if not candidate.default_levels:
        error("defaultLevels", "At least one default level is required")

    # 4. Image compression presets
    seen_titles: set[str] = set()
    for index, level in enumerate(candidate.image_compression_levels):
        field = f"imageCompressionLevels[{index}]"
        if not level.title:
            error(f"{field}.title", "Title must not be empty")
        elif not is_valid_image_level_title(level.title):
            error(
                f"{field}.title",
                f"Title may only contain letters, digits, '_' and '-' "
                f"and must not be '{RESERVED_IMAGE_LEVEL_TITLE}'",
            )
        elif level.title in seen_titles:
            error(f"{field}.title", f"Duplicate title: {level.title}")
        seen_titles.add(level.title)
        if level.max_width < 1:
            error(f"{field}.maxWidth", "maxWidth must be a positive integer")
        if level.max_height < 1:
            error(f"{field}.maxHeight", "maxHeight must be a positive integer")

    # 5. Texture ladder
    limits = candidate.texture_level_limits
    sizes = candidate.texture_level_sizes
    if len(sizes) != len(limits) + 1:
        error(
            "textureLevelSizes",
            f"Expected {len(limits) + 1} sizes for {len(limits)} limits, got {len(sizes)}",
        )
    for index, limit in enumerate(limits):
        if limit < 1:
            error(f"textureLevelLimits[{index}]", "Limits must be positive integers")
    for index, size in enumerate(sizes):
        if not is_texture_size(size):
            error(f"textureLevelSizes[{index}]", f"{size} is not a valid texture size")

    # 6. Queue capacity
    if candidate.queue_max_length < 0:
        error("queueMaxLength", "queueMaxLength must not be negative")

    if errors:
        raise ValidationError(errors, "Transmitted configuration data is invalid")

    if not is_monotonic(limits):
        # Edits are clamped one at a time; a batch can still arrive out of order.
        logger.warning(f"Texture level limits are not non-decreasing: {limits}")

    return candidate.model_copy(
        update={"api_access_whitelist": whitelist, "default_levels": default_levels},
        deep=True,
    )

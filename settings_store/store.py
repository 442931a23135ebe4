"""
Settings store — holds the current Configuration and guards every write.

Lifecycle:
    load()  once at boot: read the JSON document from Redis, fall back to
            defaults (and persist them) if it is missing or unusable
    get()   consistent snapshot for readers
    apply() validate → persist → swap, all-or-nothing

Every mutation (apply, texture tier edits) runs through _replace(), which
holds the lock across validation, the Redis write and the in-memory swap.
A reader therefore sees either the old or the new configuration, never a
half-applied or invalid one.
"""

import logging
import threading
from typing import Callable

from pydantic import ValidationError as PydanticValidationError
from redis import Redis

from config.settings import settings
from models.errors import ValidationError
from settings_store import texture_ladder
from settings_store.configuration import Configuration, default_configuration
from settings_store.validation import validate_configuration

logger = logging.getLogger(__name__)

# Whitelist entry admitting every client
WILDCARD = "*"


class SettingsStore:

    def __init__(self, redis_client: Redis, key: str = settings.REDIS_CONFIG_KEY):
        self._redis = redis_client
        self._key = key
        self._lock = threading.Lock()
        self._config = validate_configuration(default_configuration())

    def load(self) -> Configuration:
        """Load the persisted configuration. Safe to call more than once."""
        raw = self._redis.get(self._key)
        with self._lock:
            if raw is None:
                logger.info("No stored configuration found, writing defaults")
                config = validate_configuration(default_configuration())
                self._persist(config)
            else:
                try:
                    config = validate_configuration(Configuration.model_validate_json(raw))
                except (PydanticValidationError, ValidationError) as e:
                    logger.error(f"Stored configuration is invalid, using defaults: {e}")
                    config = validate_configuration(default_configuration())
                    self._persist(config)
            self._config = config
        return self.get()

    def get(self) -> Configuration:
        with self._lock:
            return self._config.model_copy(deep=True)

    def apply(self, candidate: Configuration) -> Configuration:
        """Validate and store a full configuration. Raises ValidationError."""
        return self._replace(lambda current: candidate)

    # ── Texture ladder editing ──────────────────────────────────

    def add_texture_tier(self) -> Configuration:
        def add(current: Configuration) -> Configuration:
            limits, sizes = texture_ladder.add_tier(
                current.texture_level_limits, current.texture_level_sizes
            )
            return current.model_copy(
                update={"texture_level_limits": limits, "texture_level_sizes": sizes}
            )

        return self._replace(add)

    def remove_texture_tier(self) -> bool:
        """Drop the last tier. Returns False (no-op) if only the greatest size is left."""
        with self._lock:
            if not self._config.texture_level_limits:
                return False

        def remove(current: Configuration) -> Configuration:
            limits, sizes = texture_ladder.remove_tier(
                current.texture_level_limits, current.texture_level_sizes
            )
            return current.model_copy(
                update={"texture_level_limits": limits, "texture_level_sizes": sizes}
            )

        try:
            self._replace(remove)
        except ValueError:
            # another writer removed the last tier in between
            return False
        return True

    def clamp_limit_at(self, index: int, proposed: int) -> int:
        """Set one texture limit, clamped against its neighbours. Returns the accepted value."""
        accepted: list[int] = []

        def clamp(current: Configuration) -> Configuration:
            limits = list(current.texture_level_limits)
            try:
                value = texture_ladder.clamp_limit_at(limits, index, proposed)
            except IndexError as e:
                raise ValidationError.single("textureLevelLimits", str(e))
            limits[index] = value
            accepted.append(value)
            return current.model_copy(update={"texture_level_limits": limits})

        self._replace(clamp)
        return accepted[0]

    # ── Access control ──────────────────────────────────────────

    def is_client_allowed(self, host: str | None) -> bool:
        with self._lock:
            whitelist = self._config.api_access_whitelist
        return WILDCARD in whitelist or (host is not None and host in whitelist)

    # ── Internals ───────────────────────────────────────────────

    def _replace(self, build: Callable[[Configuration], Configuration]) -> Configuration:
        with self._lock:
            candidate = build(self._config.model_copy(deep=True))
            config = validate_configuration(candidate)
            self._persist(config)
            self._config = config
        logger.info("Configuration updated")
        return config.model_copy(deep=True)

    def _persist(self, config: Configuration) -> None:
        self._redis.set(self._key, config.model_dump_json(by_alias=True))

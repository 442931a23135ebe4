"""
The user-editable compression configuration.

Field names are snake_case in Python and camelCase on the wire / in Redis
(apiPort, defaultLevels, textureLevelSizes, ...), which is the contract
the web front-end already speaks.

Only TYPES are enforced here. The semantic invariants (positive port,
non-empty whitelist, ladder lengths, unique titles...) are checked by
settings_store.validation, so that every write path (HTTP or Python)
goes through the same all-or-nothing validation.
"""

from typing import Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ImageCompressionLevel(_CamelModel):
    """An image preset: the compressed copy fits inside max_width x max_height."""

    title: str
    max_width: int
    max_height: int


class Configuration(_CamelModel):
    api_port: int
    api_access_whitelist: list[str]
    autostart: bool
    queue_max_length: int
    # ints and numeric strings are both accepted, validation normalizes to strings
    default_levels: list[Union[int, str]]
    image_compression_levels: list[ImageCompressionLevel] = Field(default_factory=list)
    texture_level_limits: list[int]
    # one size per limit + the trailing "greatest" size with no upper limit
    texture_level_sizes: list[int]

    @property
    def greatest_texture_size(self) -> int:
        return self.texture_level_sizes[-1]


def default_configuration() -> Configuration:
    """Configuration used when nothing has been persisted yet."""
    return Configuration(
        api_port=1613,
        api_access_whitelist=["127.0.0.1", "*"],
        autostart=True,
        queue_max_length=5000,
        default_levels=[
            "500", "1000", "5000", "20000", "50000", "200000",
            "500000", "2000000", "5000000", "20000000", "50000000",
        ],
        image_compression_levels=[
            ImageCompressionLevel(title="UHD", max_width=3840, max_height=2160),
            ImageCompressionLevel(title="FullHD", max_width=1920, max_height=1080),
            ImageCompressionLevel(title="Medium", max_width=800, max_height=600),
            ImageCompressionLevel(title="Small", max_width=120, max_height=120),
        ],
        texture_level_limits=[5000, 50000],
        texture_level_sizes=[1024, 2048, 8192],
    )

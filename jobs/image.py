"""
Image compression handler — one resized copy per image preset, via Pillow.

For every configured image compression level (e.g. FullHD 1920x1080) a
copy of the original is written next to it:

    <media root>/<basePath>/<mediaUid>_origin.jpg   (input)
    <media root>/<basePath>/<mediaUid>_FullHD.jpg   (output)
    <media root>/<basePath>/<mediaUid>_Small.jpg    (output)

Pillow's thumbnail() preserves aspect ratio and never upscales, so a
preset larger than the original just produces a re-encoded copy.
Outputs that already exist are skipped, so re-dispatching a job only
fills in missing presets.
"""

import os

from PIL import Image

from config.settings import settings
from jobs.base import AbstractCompressionHandler
from jobqueue.job import CompressionJob
from models.errors import WorkerFailure
from settings_store.configuration import Configuration

ORIGINAL_FILE_INDICATOR = "origin"


class ImageCompressionHandler(AbstractCompressionHandler):

    def __init__(self, media_root: str = settings.MEDIA_FILE_ROOT):
        self._media_root = media_root

    def compress(self, job: CompressionJob, config: Configuration) -> dict:
        extension = "png" if job.mime_type == "image/png" else "jpg"
        directory = os.path.join(self._media_root, job.base_path.lstrip("/"))
        input_path = os.path.join(
            directory, f"{job.media_uid}_{ORIGINAL_FILE_INDICATOR}.{extension}"
        )
        if not os.path.exists(input_path):
            raise WorkerFailure(f"Original image not found: {input_path}")

        written = []
        skipped = []
        with Image.open(input_path) as original:
            original_size = original.size
            for level in config.image_compression_levels:
                output_path = os.path.join(
                    directory, f"{job.media_uid}_{level.title}.{extension}"
                )
                if os.path.exists(output_path):
                    skipped.append(level.title)
                    continue
                copy = original.copy()
                copy.thumbnail((level.max_width, level.max_height))
                copy.save(output_path)
                written.append(output_path)

        return {
            "input_path": input_path,
            "original_size": list(original_size),
            "written": written,
            "skipped": skipped,
        }

    @property
    def mime_types(self) -> tuple[str, ...]:
        return ("image/jpeg", "image/png")

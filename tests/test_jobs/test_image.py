"""Tests for the ImageCompressionHandler and the handler registry."""

import os
from datetime import datetime, timezone

import pytest
from PIL import Image

from jobs.image import ImageCompressionHandler
from jobs.registry import get_compression_handler
from jobqueue.job import CompressionJob
from models.enums import JobStatus
from models.errors import WorkerFailure
from settings_store.configuration import ImageCompressionLevel, default_configuration


def _job(mime_type="image/jpeg"):
    return CompressionJob(
        id=1,
        base_path="/objects/4711",
        object_uid="obj-4711",
        media_uid="media-0001",
        title="statue",
        mime_type=mime_type,
        levels=["1000"],
        status=JobStatus.PROCESSING,
        submitted_at=datetime.now(timezone.utc),
    )


@pytest.fixture
def config():
    return default_configuration().model_copy(update={
        "image_compression_levels": [
            ImageCompressionLevel(title="Medium", max_width=100, max_height=100),
            ImageCompressionLevel(title="Small", max_width=50, max_height=50),
        ]
    })


@pytest.fixture
def media_root(tmp_path):
    """A media root with a 200x100 red original for media-0001."""
    directory = tmp_path / "objects" / "4711"
    directory.mkdir(parents=True)
    Image.new("RGB", (200, 100), color=(255, 0, 0)).save(directory / "media-0001_origin.jpg")
    return tmp_path


def test_writes_one_copy_per_preset(media_root, config):
    handler = ImageCompressionHandler(media_root=str(media_root))
    result = handler.compress(_job(), config)

    directory = media_root / "objects" / "4711"
    assert result["original_size"] == [200, 100]
    assert result["skipped"] == []
    assert len(result["written"]) == 2

    with Image.open(directory / "media-0001_Medium.jpg") as medium:
        assert medium.size == (100, 50)
    with Image.open(directory / "media-0001_Small.jpg") as small:
        assert small.size[0] <= 50 and small.size[1] <= 50


def test_existing_outputs_are_skipped(media_root, config):
    handler = ImageCompressionHandler(media_root=str(media_root))
    handler.compress(_job(), config)

    result = handler.compress(_job(), config)
    assert result["written"] == []
    assert result["skipped"] == ["Medium", "Small"]


def test_png_keeps_extension(media_root, config):
    directory = media_root / "objects" / "4711"
    Image.new("RGBA", (60, 60)).save(directory / "media-0001_origin.png")

    result = ImageCompressionHandler(media_root=str(media_root)).compress(
        _job("image/png"), config
    )
    assert all(path.endswith(".png") for path in result["written"])
    assert os.path.exists(directory / "media-0001_Small.png")


def test_missing_original_fails(tmp_path, config):
    handler = ImageCompressionHandler(media_root=str(tmp_path))
    with pytest.raises(WorkerFailure, match="Original image not found"):
        handler.compress(_job(), config)


def test_registry_lookup():
    assert isinstance(get_compression_handler("image/jpeg"), ImageCompressionHandler)
    assert isinstance(get_compression_handler("IMAGE/PNG"), ImageCompressionHandler)


def test_registry_unsupported_type():
    with pytest.raises(WorkerFailure, match="Mime type not supported"):
        get_compression_handler("model/obj")

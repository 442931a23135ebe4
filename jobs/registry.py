"""
Compression handler registry — maps MIME types to handler instances.

When the worker picks up a job it only knows the job's mimeType
("image/jpeg", "text/plain"...). This registry finds the handler for it.
Media types without a handler (e.g. 3D models) fail the job with a clear
message instead of crashing the worker.
"""

from jobs.base import AbstractCompressionHandler
from jobs.image import ImageCompressionHandler
from models.errors import WorkerFailure

# Each handler is instantiated once and reused (they're stateless)
_REGISTRY: dict[str, AbstractCompressionHandler] = {}


def register_handler(handler: AbstractCompressionHandler) -> None:
    for mime_type in handler.mime_types:
        _REGISTRY[mime_type.lower()] = handler


def _register_defaults() -> None:
    register_handler(ImageCompressionHandler())


_register_defaults()


def get_compression_handler(mime_type: str) -> AbstractCompressionHandler:
    """Look up a handler by MIME type. Raises WorkerFailure if unsupported."""
    handler = _REGISTRY.get(mime_type.lower())
    if handler is None:
        raise WorkerFailure(
            f"Mime type not supported: '{mime_type}'. Available: {sorted(_REGISTRY)}"
        )
    return handler

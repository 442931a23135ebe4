"""
Abstract base class for compression handlers.

Each supported media type (JPEG/PNG images, ...) implements this interface.
The worker calls handler.compress(job, config) without knowing which type
it is — it looks up the handler from the registry by MIME type.

To add a new media type:
1. Create a class that inherits AbstractCompressionHandler
2. Implement compress() and mime_types
3. Add it to the registry
"""

from abc import ABC, abstractmethod

from jobqueue.job import CompressionJob
from settings_store.configuration import Configuration


class AbstractCompressionHandler(ABC):

    @abstractmethod
    def compress(self, job: CompressionJob, config: Configuration) -> dict:
        """
        Compress the job's media file.

        Args:
            job: the job being processed (paths, levels, MIME type)
            config: configuration snapshot taken when the job started

        Returns:
            dict describing the produced files (logged by the worker).

        Raises:
            WorkerFailure (or any exception) → the job is recorded as FAILED.
        """
        ...

    @property
    @abstractmethod
    def mime_types(self) -> tuple[str, ...]:
        """MIME types this handler accepts (e.g., 'image/jpeg')."""
        ...

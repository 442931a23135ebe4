"""
Completion notifications.

A finished job carries an optional notification_email. Actually sending
mail is somebody else's job (an SMTP relay, a ticket system...), so the
queue only talks to this small interface. The default implementation
just logs what would be sent.
"""

import logging
from abc import ABC, abstractmethod

from jobqueue.job import CompressionJob

logger = logging.getLogger(__name__)


class Notifier(ABC):

    @abstractmethod
    def job_finished(self, job: CompressionJob) -> None:
        """Called once per job, after it has been archived in a terminal state."""
        ...


class LoggingNotifier(Notifier):

    def job_finished(self, job: CompressionJob) -> None:
        detail = f": {job.error_message}" if job.error_message else ""
        logger.info(
            f"Notify {job.notification_email}: job {job.id} ({job.title}) "
            f"finished as {job.status.value}{detail}"
        )

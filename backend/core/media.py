"""
Media URL post-processing.

One catalog CDN host serves broken links; the same files are available on a
sibling host. Records are rewritten before they are returned or cached. This
is a plain host substitution, not URL validation.
"""
import logging

from domain.models import ExerciseRecord

logger = logging.getLogger(__name__)

BROKEN_MEDIA_HOST = "v1.cdn.exercisedb.dev"
MEDIA_HOST_REPLACEMENT = "static.exercisedb.dev"


class MediaUrlFixer:
    """Rewrites a known-broken media host to a working one."""

    def __init__(
        self,
        broken_host: str = BROKEN_MEDIA_HOST,
        replacement_host: str = MEDIA_HOST_REPLACEMENT,
    ):
        self.broken_host = broken_host
        self.replacement_host = replacement_host

    def fix_url(self, url: str) -> str:
        if not url or not self.broken_host or self.broken_host not in url:
            return url
        fixed = url.replace(self.broken_host, self.replacement_host)
        logger.debug(f"Rewrote broken media URL: {url} -> {fixed}")
        return fixed

    def fix_record(self, record: ExerciseRecord) -> ExerciseRecord:
        """Return ``record`` with its media host rewritten (same object if unchanged)."""
        fixed = self.fix_url(record.media_url)
        if fixed == record.media_url:
            return record
        return record.model_copy(update={"media_url": fixed})

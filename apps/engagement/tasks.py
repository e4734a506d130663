from celery import shared_task
import logging

from .services import reset_stale_streaks as reset_streaks

logger = logging.getLogger(__name__)


@shared_task
def reset_stale_streaks():
    """
    Nightly job: zero streaks that were not extended yesterday.
    """
    count = reset_streaks()
    logger.info(f"Stale streak reset finished ({count} users)")
    return count

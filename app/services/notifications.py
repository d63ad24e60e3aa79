"""Fire-and-forget notifications to the concierge"""

from typing import Any, Dict
import structlog

logger = structlog.get_logger()

FIRE_BLOCK_CREATED = "fire-block-created"
CONCIERGE_SERVICE_NEEDED = "concierge-service-needed"


class Notifier:
    """Outbound messaging collaborator"""

    def notify(self, event: str, payload: Dict[str, Any]) -> None:
        raise NotImplementedError


class CeleryNotifier(Notifier):
    """Queue delivery on the Celery worker"""

    def notify(self, event: str, payload: Dict[str, Any]) -> None:
        from app.jobs.tasks import deliver_notification

        deliver_notification.delay(event, payload)
        logger.info("Notification queued", notification_event=event)


def dispatch(notifier: Notifier, event: str, payload: Dict[str, Any]) -> None:
    """Send a notification without ever failing the caller"""
    try:
        notifier.notify(event, payload)
    except Exception as e:
        logger.error("Failed to dispatch notification", notification_event=event, error=str(e))


def get_notifier() -> Notifier:
    return CeleryNotifier()

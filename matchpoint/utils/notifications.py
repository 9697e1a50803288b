# matchpoint/utils/notifications.py
"""
Fire-and-forget user notifications.

Events are published to Kafka for the notification consumer to render and
deliver. Publishing never raises: a registry change that already committed
must not be undone because a notification could not be sent.
"""
import logging
from datetime import datetime, timezone
from typing import Optional

from matchpoint.core.kafka_producer import get_kafka_singleton

logger = logging.getLogger(__name__)

TOPIC_NOTIFICATIONS = "matchpoint.notifications.v1"

# Event kinds
WAITLIST_PROMOTED = "WAITLIST_PROMOTED"
GAME_CANCELED = "GAME_CANCELED"


def notify(user_id: str, event_kind: str, payload: Optional[dict] = None) -> bool:
    """
    Publish one notification event.

    Returns:
        bool: True if handed to Kafka, False if skipped or failed
    """
    try:
        producer = get_kafka_singleton()

        if producer is None:
            logger.warning(f"Kafka producer unavailable, skipping {event_kind} for user {user_id}")
            return False

        event_data = {
            "type": event_kind,
            "userId": user_id,
            "payload": payload or {},
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        producer.send(TOPIC_NOTIFICATIONS, value=event_data)

        logger.info(f"Published {event_kind} notification for user {user_id}")
        return True

    except Exception as e:
        logger.error(f"Failed to publish {event_kind} notification for user {user_id}: {e}", exc_info=True)
        return False

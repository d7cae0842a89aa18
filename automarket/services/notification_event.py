from automarket.core.config import settings
from automarket.core.logging import setup_logging
from automarket.utils.rabbitmq import publish_event

logger = setup_logging()

EVENT_MESSAGE_RECEIVED = "message_received"
EVENT_LISTING_MODERATED = "listing_moderated"
EVENT_TRANSACTION_PROPOSED = "transaction_proposed"
EVENT_TRANSACTION_UPDATED = "transaction_updated"


async def notify(event: str, payload: dict) -> None:
    """Fire-and-forget e-mail notification; failures are only logged"""
    try:
        await publish_event(settings.notifications_queue, event, payload)
    except Exception as e:
        logger.error(f"Notification {event} was not delivered: {e}")

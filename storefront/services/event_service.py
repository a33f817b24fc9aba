# storefront/services/event_service.py
from datetime import datetime, timezone

import requests
from kombu.exceptions import OperationalError

from storefront.celery_worker import celery_app
from storefront.utils.retry import http_retry
from storefront.utils.settings import (
    EVENT_PRODUCER_URL,
    EVENT_PRODUCER_TIMEOUT,
    EVENT_TASK_EXPIRES_SECONDS,
)
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class EventService:
    """
    Fire-and-forget event logging through the Celery queue.
    Dispatch problems are logged and never reach the request that caused them.
    """

    @staticmethod
    def log_event(event_name: str, user_id: str, properties: dict):
        try:
            log_event_task.apply_async(
                args=(event_name, user_id, properties),
                expires=EVENT_TASK_EXPIRES_SECONDS,
            )
        except (OperationalError, OSError) as e:
            logger.error(f"Could not queue event '{event_name}' for {user_id}: {e}")

    @classmethod
    def user_event(cls, action: str, user_id: str, email: str, role: str):
        event_name = "User Signup" if action == "signup" else "User Login"
        cls.log_event(
            event_name,
            user_id,
            {
                "date": datetime.now(timezone.utc).isoformat(),
                "name": user_id,
                "email": email,
                "role": role,
                "action": action,
                "userId": user_id,
            },
        )

    @classmethod
    def order_placed(cls, user_id: str, order_id: int, payment_id: str, total: str):
        cls.log_event(
            "Order Placed",
            user_id,
            {"orderId": order_id, "paymentId": payment_id, "total": total},
        )


@http_retry()
def _post_event(payload: dict) -> int:
    resp = requests.post(EVENT_PRODUCER_URL, json=payload, timeout=EVENT_PRODUCER_TIMEOUT)
    resp.raise_for_status()
    return resp.status_code


@celery_app.task(name="storefront.services.event_service.log_event_task")
def log_event_task(event_name: str, user_id: str, properties: dict):
    payload = {"eventName": event_name, "userId": user_id, "properties": properties}

    if not EVENT_PRODUCER_URL:
        logger.info(f"[EVENT] {event_name} for {user_id} (producer not configured)")
        return {"event": event_name, "user_id": user_id, "status": "skipped"}

    try:
        status_code = _post_event(payload)
    except requests.RequestException as e:
        logger.error(f"Failed to send event '{event_name}' to producer: {e}")
        return {"event": event_name, "user_id": user_id, "status": "failed"}

    logger.info(f"Event '{event_name}' sent to producer, status code: {status_code}")
    return {"event": event_name, "user_id": user_id, "status": "sent"}

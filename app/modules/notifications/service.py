import logging
from typing import List, Optional, Protocol

from app.modules.notifications.schemas import Notification

logger = logging.getLogger(__name__)

DEFAULT_POST_MESSAGE = "I have bought water"


class NotificationSender(Protocol):
    def send(self, notification: Notification) -> None:
        ...


class LoggingSender:
    """Writes notifications to the log. Push delivery happens outside this service."""

    def send(self, notification: Notification) -> None:
        logger.info(
            f"Notification to {len(notification.recipients)} recipient(s): "
            f"{notification.title} - {notification.body}"
        )


class NotificationService:
    def __init__(self, sender: NotificationSender):
        self.sender = sender

    def _dispatch(self, notification: Notification) -> Optional[Notification]:
        if not notification.recipients:
            logger.debug(f"Skipping notification with no recipients: {notification.title}")
            return None
        self.sender.send(notification)
        return notification

    def post_created(
        self,
        recipients: List[str],
        owner_name: str,
        message: str,
        post_id: str,
        partner_name: Optional[str] = None,
    ) -> Optional[Notification]:
        text = message.strip() or DEFAULT_POST_MESSAGE
        if partner_name:
            body = f"{owner_name} & {partner_name} fetched water together: {text}"
        else:
            body = f"{owner_name} fetched water: {text}"
        return self._dispatch(Notification(
            recipients=recipients,
            title="New water fetch!",
            body=body,
            data={"type": "post_created", "post_id": post_id},
        ))

    def post_verified(self, recipients: List[str], verifier_name: str, post_id: str) -> Optional[Notification]:
        return self._dispatch(Notification(
            recipients=recipients,
            title="Post verified",
            body=f"{verifier_name} verified your water fetch post.",
            data={"type": "post_verified", "post_id": post_id},
        ))

    def post_rejected(self, recipients: List[str], rejector_name: str, post_id: str) -> Optional[Notification]:
        return self._dispatch(Notification(
            recipients=recipients,
            title="Post rejected",
            body=f"{rejector_name} rejected your water fetch post.",
            data={"type": "post_rejected", "post_id": post_id},
        ))

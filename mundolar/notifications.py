from __future__ import annotations

from typing import Any, Optional

from mundolar.data.models import Notification, NotificationType
from mundolar.logging import get_logger

logger = get_logger(__name__)


def create_notification(
    client: Any,
    user_id: str,
    title: str,
    message: str,
    type: NotificationType,
    related_id: Optional[str] = None,
) -> None:
    """Insert one unread notification. Failures are logged, never raised."""
    row = Notification(user_id=user_id, title=title, message=message, type=type, related_id=related_id)
    try:
        client.table("notifications").insert([row.model_dump()]).execute()
    except Exception as e:
        logger.error(f"Error creating notification for {user_id}: {e}")


def notify_admins(
    client: Any,
    title: str,
    message: str,
    type: NotificationType,
    related_id: Optional[str] = None,
) -> int:
    """Notify every profile with the Admin role.

    Returns the number of notifications written (0 on failure).
    """
    try:
        admins = client.table("profiles").select("id").eq("role", "Admin").execute()
        rows = [
            Notification(
                user_id=admin["id"], title=title, message=message, type=type, related_id=related_id
            ).model_dump()
            for admin in admins.data or []
        ]
        if rows:
            client.table("notifications").insert(rows).execute()
        return len(rows)
    except Exception as e:
        logger.error(f"Error notifying admins: {e}")
        return 0

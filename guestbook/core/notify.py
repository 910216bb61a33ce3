import logging
import httpx
from guestbook.core.config import settings

logger = logging.getLogger(__name__)

async def send_ntfy_notification(message: str, title: str = "Guestbook Alert", priority: str = "default"):
    """
    Push an alert through ntfy.
    :param message: body
    :param title: title
    :param priority: max, high, default, low, min
    """
    if not settings.NTFY_ENABLED or not settings.NTFY_TOPIC or settings.ENVIRONMENT == "test":
        return

    url = f"{settings.NTFY_URL}/{settings.NTFY_TOPIC}"
    headers = {
        "Title": title,
        "Priority": priority,
        "Tags": "warning" if priority in ["high", "max"] else "information_source"
    }

    try:
        async with httpx.AsyncClient(timeout=5) as client:
            await client.post(url, content=message.encode("utf-8"), headers=headers)
    except httpx.HTTPError as e:
        logger.warning(f"Failed to send ntfy notification: {e}")

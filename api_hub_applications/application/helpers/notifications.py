"""
Best-effort email notifications.

Emails follow a change that has already been saved, so a failed send is
logged and the operation still succeeds.

Dependencies: api_hub_applications.core.exceptions
System role: Notification error boundary
"""

import logging
from typing import Awaitable

from api_hub_applications.core.exceptions import EmailException

logger = logging.getLogger(__name__)


async def notify(send: Awaitable[None], description: str) -> None:
    try:
        await send
    except EmailException as e:
        logger.warning(
            f"Failed to send {description} email",
            extra={"issue": e.issue.value, "error": str(e)},
        )

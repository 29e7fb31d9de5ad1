"""
Console notification adapter - Implements NotificationGateway protocol.

This module provides a console-based implementation of the domain's
notification port, logging every message to stdout for demo purposes.
"""

import logging

from src.domain.ports import DeliveryResult

logger = logging.getLogger(__name__)


class ConsoleNotificationGateway:
    """
    Implements NotificationGateway protocol via console logging.

    Uses structural subtyping - no explicit inheritance from Protocol.
    For demo/development purposes - one-time codes show up in the logs.
    """

    async def send(self, to: str, subject: str, body: str) -> DeliveryResult:
        """
        Log the message at INFO level (simulates email delivery).

        Args:
            to: Recipient address
            subject: Message subject line
            body: Plain-text body
        """
        logger.info("[NOTIFICATION] To: %s Subject: %s Body: %s", to, subject, body)
        return DeliveryResult(success=True)

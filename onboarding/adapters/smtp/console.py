"""
Console notification adapter - Implements NotificationSender protocol.

This module provides a console-based implementation of the domain's
notification port, logging templated messages to stdout for demo purposes.
"""

import logging
from typing import Any

logger = logging.getLogger(__name__)


class ConsoleNotificationSender:
    """
    Implements NotificationSender protocol via console logging.

    Uses structural subtyping - no explicit inheritance from Protocol.
    For demo/development purposes - prints notifications to stdout.
    """

    def send(self, recipient: str, template_name: str, data: dict[str, Any]) -> bool:
        """
        Log a templated notification (simulates email delivery).

        In production, this would be replaced with an SMTP adapter.
        Logged at INFO level to be visible in docker-compose logs.

        Args:
            recipient: Recipient email address
            template_name: Name of the notification template
            data: Template variables

        Returns:
            Always True (console delivery cannot fail)
        """
        logger.info(
            "[NOTIFICATION] To: %s Template: %s Data: %s",
            recipient,
            template_name,
            {key: data[key] for key in sorted(data)},
        )
        return True

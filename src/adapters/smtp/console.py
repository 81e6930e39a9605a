"""
Console activation sender adapter - Implements ActivationSender protocol.

This module provides a console-based implementation of the domain's
activation delivery port, logging activation tokens for demo purposes.
"""

import logging

logger = logging.getLogger(__name__)


class ConsoleActivationSender:
    """
    Implements ActivationSender protocol via console logging.

    Uses structural subtyping - no explicit inheritance from Protocol.
    For demo/development purposes - prints activation tokens to stdout.
    """

    def send_activation_token(self, email: str, user_name: str, token: str) -> None:
        """
        Log the activation token (simulates the activation email).

        In production, this would be replaced with an SMTP adapter.

        Args:
            email: Recipient email address
            user_name: New account's user name
            token: Activation token
        """
        logger.info("[ACTIVATION] User: %s Email: %s Token: %s", user_name, email, token)

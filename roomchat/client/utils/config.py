"""
Client configuration module.

This module handles client-side configuration settings.
"""

from roomchat.common.constants import (
    DEFAULT_HOST, DEFAULT_PORT, EXIT_GRACE, MAX_RETRY_ATTEMPTS, RETRY_DELAY_BASE
)


class ClientConfig:
    """Client configuration class."""

    def __init__(self, host: str = DEFAULT_HOST, port: int = DEFAULT_PORT, use_color: bool = True):
        self.host = host
        self.port = port

        # Display settings
        self.use_color = use_color

        # Connection settings
        self.retry_attempts = MAX_RETRY_ATTEMPTS
        self.retry_delay_base = RETRY_DELAY_BASE
        self.exit_grace = EXIT_GRACE  # seconds

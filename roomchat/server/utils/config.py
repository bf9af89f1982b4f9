"""
Server configuration module.

This module handles server-side configuration settings.
"""

from roomchat.common.constants import DEFAULT_SERVER_HOST, DEFAULT_PORT, MAX_CLIENTS, LINE_LIMIT


class ServerConfig:
    """Server configuration class."""

    def __init__(self, host: str = DEFAULT_SERVER_HOST, port: int = DEFAULT_PORT,
                 max_clients: int = MAX_CLIENTS, line_limit: int = LINE_LIMIT,
                 console_enabled: bool = True):
        self.host = host
        self.port = port

        # Registry capacity is fixed for the lifetime of the process
        self.max_clients = max_clients

        # Framing
        self.line_limit = line_limit

        # Admin console on stdin
        self.console_enabled = console_enabled

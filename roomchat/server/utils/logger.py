"""
Server logging module.

This module handles server-side logging functionality.
"""

import logging


class ServerLogger:
    """Server logging class."""

    def __init__(self, log_level: int = logging.INFO):
        self.logger = logging.getLogger('roomchat_server')
        self.logger.setLevel(log_level)

        # Remove existing handlers
        for handler in self.logger.handlers[:]:
            self.logger.removeHandler(handler)

        # Create console handler
        console_handler = logging.StreamHandler()
        console_handler.setLevel(log_level)

        # Create formatter
        formatter = logging.Formatter(
            '%(asctime)s [%(levelname)s] %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        console_handler.setFormatter(formatter)

        # Add handler to logger
        self.logger.addHandler(console_handler)

    def info(self, message: str):
        """Log info message."""
        self.logger.info(message)

    def error(self, message: str):
        """Log error message."""
        self.logger.error(message)

    def warning(self, message: str):
        """Log warning message."""
        self.logger.warning(message)

    def debug(self, message: str):
        """Log debug message."""
        self.logger.debug(message)

    def log_listening(self, addr: str):
        self.info(f"[Server] Listening on {addr}")

    def log_connection(self, peer, client_id: int):
        """Log an accepted and registered connection."""
        self.info(f"[Server] New connection accepted from {peer}, assigned id={client_id}")

    def log_rejected(self, peer):
        """Log a connection refused because every slot is taken."""
        self.warning(f"[Server] Rejected incoming connection from {peer}: server full.")

    def log_disconnect(self, client_id: int, total: int):
        """Log a slot becoming free."""
        self.info(f"[Server] Client {client_id} disconnected. Total disconnected: {total}")

    def log_room_change(self, client_id: int, room: str):
        self.info(f"[Server] Client {client_id} joined Room{room}")

    def log_chat(self, client_id: int, room: str, message: str):
        self.debug(f"[Server] Client{client_id}@Room{room}: {message}")

    def log_announce(self, text: str, delivered: int):
        self.info(f"[Server] broadcasted announcement to {delivered} client(s): {text}")

    def log_send_failure(self, client_id: int, error: Exception):
        self.warning(f"[Server] Failed to deliver to client {client_id}: {error}")

    def log_error(self, operation: str, error: Exception):
        """Log error with operation context."""
        self.error(f"Error in {operation}: {error}")


# Global logger instance
logger = ServerLogger()

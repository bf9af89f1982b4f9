"""
Shared constants for the roomchat relay.

This module contains all constants used across client and server components.
"""

# Network Configuration
DEFAULT_HOST = '127.0.0.1'
DEFAULT_SERVER_HOST = '0.0.0.0'
DEFAULT_PORT = 12345

# Capacity
MAX_CLIENTS = 5

# Framing
ENCODING = 'utf-8'
LINE_TERMINATORS = '\r\n'
LINE_LIMIT = 1024  # bytes per line, terminator included

# Rooms
ROOMS = ('A', 'B', 'C')

# Client timing
EXIT_GRACE = 0.1  # seconds to wait for the farewell after EXIT!
MAX_RETRY_ATTEMPTS = 3
RETRY_DELAY_BASE = 0.5


# Client to Server commands
class Commands:
    EXIT = 'EXIT!'
    ROOM_PREFIX = '/room '


# Admin console commands
class AdminCommands:
    ANNOUNCE_PREFIX = '/announce '
    LIST = '/list'


# Classification of a received client line
class CommandKind:
    EMPTY = 'empty'
    EXIT = 'exit'
    JOIN_ROOM = 'join_room'
    INVALID_ROOM = 'invalid_room'
    CHAT = 'chat'

"""
Protocol definitions for the roomchat relay.

The wire format is plain UTF-8 text, one message per newline-terminated line,
with no length prefix and no escaping. This module builds every server line and
classifies every client line so that the session handler and the client never
format protocol text themselves.
"""

from dataclasses import dataclass
from typing import Optional

from roomchat.common.constants import (
    ENCODING, LINE_TERMINATORS, ROOMS, Commands, CommandKind
)


@dataclass
class ClientCommand:
    """A classified line received from a client."""
    kind: str
    room: Optional[str] = None
    text: str = ''


def encode_line(text: str) -> bytes:
    """Encode a single protocol line for the wire."""
    return (text + '\n').encode(ENCODING)


def decode_line(data: bytes) -> str:
    """Decode raw bytes and strip the line terminators only."""
    return data.decode(ENCODING, errors='replace').rstrip(LINE_TERMINATORS)


def is_room(value: str) -> bool:
    return value in ROOMS


def parse_client_line(line: str) -> ClientCommand:
    """
    Classify a client line that already had its terminators stripped.

    Matching is case-sensitive and no interior whitespace is trimmed, so
    "a", " A" and "/room  A" are not room selections.
    """
    if not line:
        return ClientCommand(CommandKind.EMPTY)

    if line == Commands.EXIT:
        return ClientCommand(CommandKind.EXIT)

    if line.startswith(Commands.ROOM_PREFIX):
        room = line[len(Commands.ROOM_PREFIX):]
        if is_room(room):
            return ClientCommand(CommandKind.JOIN_ROOM, room=room)
        return ClientCommand(CommandKind.INVALID_ROOM, text=room)

    if is_room(line):
        return ClientCommand(CommandKind.JOIN_ROOM, room=line)

    return ClientCommand(CommandKind.CHAT, text=line)


# Server to Client messages

def create_welcome_message(client_id: int) -> str:
    return f"Welcome! Your client id is {client_id}"


def create_room_prompt_message() -> str:
    return "Welcome! Enter room: A / B / C (example: A)"


def create_server_full_message() -> str:
    return "Server is full!"


def create_joined_message(room: str) -> str:
    """Confirmation sent to the client that selected a room."""
    return f"You joined Room{room}"


def create_user_joined_message(client_id: int, room: str) -> str:
    """Notice sent to the other members of the room."""
    return f"[Server] Client {client_id} joined Room{room}."


def create_chat_relay_message(client_id: int, room: str, text: str) -> str:
    return f"Client{client_id}@Room{room}: {text}"


def create_announce_message(text: str) -> str:
    return f"[ANNOUNCE] {text}"


def create_invalid_room_message() -> str:
    return "Invalid room. Use A or B or C"


def create_not_in_room_message() -> str:
    return "You are not in any room. Enter A/B/C or use /room <A|B|C>"


def create_line_too_long_message() -> str:
    return "Message too long"


def create_goodbye_message() -> str:
    return "Goodbye!"

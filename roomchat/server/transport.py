"""
Connection transport helpers.

Thin wrappers around asyncio.StreamWriter used by the registry, the broadcast
engine and the session handler. Writes are best effort: a failure is reported
through the return value and never raised to the caller.
"""

import asyncio

from roomchat.common.protocol_definitions import encode_line


def peer_name(writer: asyncio.StreamWriter) -> str:
    """Render the remote address of a connection as HOST:PORT."""
    peer = writer.get_extra_info('peername')
    if isinstance(peer, tuple) and len(peer) >= 2:
        return f"{peer[0]}:{peer[1]}"
    return str(peer)


async def send_line(writer: asyncio.StreamWriter, text: str) -> bool:
    """Send one protocol line. Returns False if the connection failed."""
    if writer is None or writer.is_closing():
        return False

    writer.write(encode_line(text))
    try:
        await writer.drain()
    except (ConnectionError, OSError):
        return False
    return True


async def close_connection(writer: asyncio.StreamWriter):
    """Close a connection, ignoring errors from a peer that is already gone."""
    if writer is None:
        return
    writer.close()
    try:
        await writer.wait_closed()
    except (ConnectionError, OSError):
        pass

#!/usr/bin/env python3
"""
roomchat Client - Main Entry Point

Usage:
    python main_client.py [--server-ip HOST] [--port PORT] [--no-color]

Once connected:
    A / B / C             Join or switch room (also: /room A)
    EXIT!                 Leave the server
    anything else         Chat to everyone in your room
"""

import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from roomchat.client.main_client import main


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""
roomchat Server - Main Entry Point

Usage:
    python main_server.py

Optional arguments:
    --host HOST           Bind address (default: 0.0.0.0)
    --port PORT           TCP port (default: 12345)
    --no-console          Do not read admin commands from stdin

Admin console commands (typed into the server's terminal):
    /announce <text>      Send "[ANNOUNCE] <text>" to every connected client
    /list                 Show every slot with its client id and room
"""

import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from roomchat.server.main_server import main


if __name__ == "__main__":
    main()

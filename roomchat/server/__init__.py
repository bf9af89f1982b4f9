"""
Server package for the roomchat relay.

This package contains all server-side functionality including:
- Client registry and room membership
- Room and server-wide broadcasting
- Per-connection sessions
- Admin console
- Configuration and utilities
"""

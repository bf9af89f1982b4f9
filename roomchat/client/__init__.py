"""
Client package for the roomchat relay.

This package contains the terminal client:
- Receive and send loops over one TCP connection
- Coloured display of server notices
- Configuration and utilities
"""

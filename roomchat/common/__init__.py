"""
Shared definitions used by both the roomchat client and server.
"""

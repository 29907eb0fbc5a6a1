"""
WebSocket Package

Realtime transport: connection registry, event dispatcher and Socket.IO glue.
"""

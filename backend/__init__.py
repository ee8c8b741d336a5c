"""Backend package for the Bug Fights server.

Provides the FastAPI app, the fixed-rate tick loop and WebSocket broadcast.
It holds no game logic.
"""

__version__ = "1.0.0"

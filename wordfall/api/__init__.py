"""HTTP and WebSocket API for the game."""

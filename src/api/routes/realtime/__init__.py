"""Room subscriptions over WebSocket."""

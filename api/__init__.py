"""ASGI entry point (api.index:app)."""

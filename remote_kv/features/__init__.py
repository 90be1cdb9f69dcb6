"""Feature modules exposing HTTP routes."""

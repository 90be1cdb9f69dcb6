"""Core configuration, exceptions and request dependencies."""

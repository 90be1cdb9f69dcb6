"""remote-kv: key-value HTTP gateway over an object-storage bucket."""

__version__ = "1.0.0"

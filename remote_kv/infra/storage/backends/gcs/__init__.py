"""Google Cloud Storage backend."""

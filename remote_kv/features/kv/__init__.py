"""Key-value feature: namespacing, validation, service and HTTP routes."""

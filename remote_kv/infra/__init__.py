"""Infrastructure: logging, metrics and storage backends."""

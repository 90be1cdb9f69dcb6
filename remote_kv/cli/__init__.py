"""remote-kv command line interface."""

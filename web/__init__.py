"""Web package - HTTP API for table layout."""

"""Services backing the routes."""

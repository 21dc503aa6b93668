"""Dashboard API package."""

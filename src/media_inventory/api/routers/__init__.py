"""Route modules for the media API."""

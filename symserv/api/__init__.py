"""HTTP layer: Flask app serving address lookups as plain text."""

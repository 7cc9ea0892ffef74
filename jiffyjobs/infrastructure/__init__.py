"""Infrastructure layer: persistence, realtime delivery and external services."""

"""Domain layer: entities, status constants and error types."""

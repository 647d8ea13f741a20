"""Infrastructure layer: document store, repositories and realtime listeners."""

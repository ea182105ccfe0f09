"""Infrastructure layer: persistence, observability and app lifecycle."""

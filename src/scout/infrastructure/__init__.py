"""Infrastructure layer: document loading and template environments."""

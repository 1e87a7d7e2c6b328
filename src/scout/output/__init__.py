"""Output layer: JSON, quiet, and Rich renderings of ServiceResult."""

"""Infrastructure layer: configuration, logging, persistence and collaborator clients."""

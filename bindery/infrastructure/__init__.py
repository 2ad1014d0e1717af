"""Infrastructure layer - container, registry, resolver and logging."""

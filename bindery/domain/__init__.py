"""Domain layer - DI contracts and shared exceptions."""

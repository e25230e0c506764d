"""Domain layer - models, views and symbol rules."""

"""Infrastructure adapters for the application ports."""

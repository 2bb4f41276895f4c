"""Domain errors."""

"""remedy command-line interface."""

"""Core models, configuration and terminal output."""

"""Core settings and logging for the signage service."""

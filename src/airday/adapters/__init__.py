"""Adapters for external services the station talks to."""

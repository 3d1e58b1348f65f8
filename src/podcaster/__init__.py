"""Podcaster - a chat agent that writes, narrates and publishes podcasts."""

__version__ = "0.1.0"

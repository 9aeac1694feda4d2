"""Headshot Studio: turns an uploaded photo into a corporate headshot with Gemini."""

__version__ = "1.0.0"

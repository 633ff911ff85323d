"""Tavern Logger — mock OpenAI endpoint that logs roleplay transcripts per character."""

__version__ = "0.1.0"

"""Mentor chat: resource retrieval and prompt assembly for the mentoring assistant."""

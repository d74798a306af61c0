"""Utilities - source fetching and image encoding."""

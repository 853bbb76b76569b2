"""Loaders for game and history files."""

"""Wingspan score keeper HTTP API

Usage:
    python -m wingspan_score.api.run

Then open http://localhost:8000/docs in your browser.
"""

"""Shared songs: models, previews, feed state and the share form."""

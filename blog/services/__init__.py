"""Content services: loading and rendering the markdown posts."""

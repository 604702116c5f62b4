"""Core utilities and shared application primitives.

Modules in this package hold the site configuration, request middlewares
and the small validation helpers the routes rely on.
"""

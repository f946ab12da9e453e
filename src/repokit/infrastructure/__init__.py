"""Infrastructure layer: entity stores and the generic repository.

Imports domain and services; never commands, output or config.
"""

"""Persistence layer: collaborator protocols and the SQLite adapter."""

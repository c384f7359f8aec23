"""Persistence adapters: table models, mappers and PostgreSQL repositories."""

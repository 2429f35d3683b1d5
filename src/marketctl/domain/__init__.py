"""Domain layer — entity kinds, records, lifecycle rules, and validation.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""

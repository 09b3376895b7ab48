"""Domain layer: key grammar, construction, parsing, and canonicalization.

This layer depends only on stdlib, pydantic, and ruamel.yaml.
It must never import from services, infrastructure, commands, or config.
"""

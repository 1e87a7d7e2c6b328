"""Domain layer: spec models, rule catalog, and the emitted type AST.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""

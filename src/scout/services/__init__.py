"""Service layer: operations returning ServiceResult.

Services may import from domain, generator, infrastructure, and config.
They must never import from commands or output.
"""

"""Service layer — operations returning ServiceResult.

Services may import from domain, validation, infrastructure, plugins and config.
They must never import from commands or output.
"""

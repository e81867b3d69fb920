"""Domain layer — model records, identifier grammar, defects, analysis.

This layer depends only on stdlib, pydantic, and networkx.
It must never import from services, infrastructure, commands, or config.
"""

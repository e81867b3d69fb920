"""Infrastructure layer — JSON decoding/encoding and file I/O for models.

Depends on stdlib, pydantic and the domain layer. It must never import
from services, commands, or output.
"""

# ridebook/shared/__init__.py
"""
Code shared between services.

Modules:
- models: DTOs, request schemas and response envelopes
- errors: error taxonomy raised by services
"""

__all__: list[str] = []

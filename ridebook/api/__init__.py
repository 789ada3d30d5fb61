# ridebook/api/__init__.py
"""
HTTP layer: application factory, authentication dependencies and error handlers.
"""

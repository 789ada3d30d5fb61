# ridebook/__init__.py
"""
Ride-booking backend.
"""

__version__ = "1.0.0"

"""
framefetch: a blocking client for frame-serving media endpoints.
"""

__version__ = "0.1.0"

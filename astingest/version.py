"""
Version information.

The version is part of the durable cache path, so bump it whenever the
serialized AST format changes.
"""

__version__ = "1.1.0"

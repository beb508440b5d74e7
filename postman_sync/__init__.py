"""
Postman → Readme Sync Engine

Generates Markdown documentation from a Postman collection and keeps
the matching pages on Readme in sync.
"""

__version__ = "1.0.0"

"""
feedsync - supplier feed ingestion service
"""

__version__ = "1.0.0"

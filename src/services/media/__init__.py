"""
Media module - Recording download and MIME-type inference.
"""

from .fetcher import MediaFetcher, infer_content_type

__all__ = ["MediaFetcher", "infer_content_type"]

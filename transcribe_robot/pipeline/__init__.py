"""
Per-file processing pipeline
"""

from .processor import FileProcessor

__all__ = [
    "FileProcessor",
]

"""
Document mutation and storage layer.
"""

from .doc_data import DocData

__all__ = ["DocData"]

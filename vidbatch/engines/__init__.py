"""Analyzer engine implementations."""
from .analyzer import VideoAnalyzer

__all__ = ["VideoAnalyzer"]

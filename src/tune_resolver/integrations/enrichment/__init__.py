"""
AI enrichment package.
"""
from .enricher import OpenAIEnricher

__all__ = ["OpenAIEnricher"]

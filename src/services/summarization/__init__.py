"""
Summarization module - Model selection, generation and pipeline orchestration.
"""

from .generator import RetryPolicy, SummaryGenerator
from .sanitizer import sanitize_summary
from .service import SummarizationService

__all__ = ["RetryPolicy", "SummarizationService", "SummaryGenerator", "sanitize_summary"]

"""
Summarize module: upload page, summary endpoint and API key persistence.
"""

from .factory import create_summarize_module
from .services import RequestPresentation, SummarizeService

__all__ = ["create_summarize_module", "RequestPresentation", "SummarizeService"]

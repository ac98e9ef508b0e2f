"""
Services package for the document analyzer.

Contains:
- text_extractor: PDF and Word text extraction
- ai: Language model request, prompt and response parsing
- analysis_service: Batch analysis orchestration
- document_service: Upload quota, listing and deletion
- storage: Upload file storage
"""

from .ai import AnalysisRequester
from .analysis_service import AnalysisOrchestrator
from .storage import DocumentStorage
from .text_extractor import TextExtractor

__all__ = ["AnalysisOrchestrator", "AnalysisRequester", "DocumentStorage", "TextExtractor"]

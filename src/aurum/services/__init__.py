"""Clients for the hosted AI services: screenshot extraction and wealth analysis."""

from .analysis import AnalysisService, build_assets_summary, parse_analysis_response
from .extraction import ExtractionService, parse_extraction_response, sniff_image_mime

__all__ = [
    "AnalysisService",
    "ExtractionService",
    "build_assets_summary",
    "parse_analysis_response",
    "parse_extraction_response",
    "sniff_image_mime",
]

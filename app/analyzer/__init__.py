"""
Project Document Analyzer Backend.

A FastAPI service that extracts text from uploaded project documents
(PDF/Word) and summarizes them with a remote language model.
"""

__version__ = "1.0.0"

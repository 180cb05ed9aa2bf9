"""
Test Solver - Shared Library

This package contains the code behind the solve-test service:
- Document ingestion (PDF pages, images)
- Question extraction and answering with LLMs
- The page-batched extraction/solving pipeline

The Azure Function and local scripts import from this library.
"""

__version__ = "0.1.0"

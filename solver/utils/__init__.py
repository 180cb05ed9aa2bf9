"""Helper utilities."""

from .language import detect_language, detect_language_direction, detect_rtl

__all__ = ["detect_language", "detect_language_direction", "detect_rtl"]

"""
Question answering strategies.

- single_question: one LLM call per extracted question (used by the pipeline)
- direct: the whole document solved in a single LLM call
"""

from .single import LLMQuestionSolver
from .direct import DirectDocumentSolver

__all__ = ["LLMQuestionSolver", "DirectDocumentSolver"]

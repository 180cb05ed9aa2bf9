# solver/core/processor.py
"""
Core document processing logic extracted from the Azure Function.
This can be used both by Azure Functions and local testing scripts.
"""

import asyncio
import logging
from typing import Any, BinaryIO, Dict, Optional, Union

from solver.config import Config, config as default_config
from solver.extractors import ExtractorFactory
from solver.extractors.base import DocumentSolver, PipelineConfig, SolveResult
from solver.llm import BaseLLMClient, create_llm_client
from solver.parsers import BaseDocumentParser, ParsedDocument, is_supported_media_type, parser_for_media_type
from solver.utils.language import detect_language, detect_language_direction

from .exceptions import (
    DocumentParseError,
    DocumentTooLargeError,
    EmptyDocumentError,
    ProcessingTimeoutError,
    SolverError,
    UnsupportedMediaTypeError,
)


class ProcessingResult:
    """Result of document processing operation."""

    def __init__(
        self,
        success: bool,
        message: str,
        result: Optional[SolveResult] = None,
        error: Exception = None,
        status_code: int = 200
    ):
        self.success = success
        self.message = message
        self.result = result
        self.error = error
        self.status_code = status_code

    @property
    def answer_count(self) -> int:
        return len(self.result.answers) if self.result else 0

    @classmethod
    def failed(cls, error: SolverError) -> "ProcessingResult":
        return cls(
            success=False,
            message=error.user_message,
            error=error,
            status_code=error.status_code
        )

    def to_response(self) -> Dict[str, Any]:
        """Build the JSON body returned to the caller."""
        if not self.success:
            return {"success": False, "error": self.message}

        summary = self.result.summary
        return {
            "success": True,
            "answers": [a.to_dict() for a in self.result.answers],
            "metadata": {
                "total_questions": summary.total_questions,
                "average_confidence": summary.average_confidence,
                "document_type": summary.document_type,
                "language": summary.language,
                "text_direction": summary.text_direction,
            },
        }

    def __str__(self):
        return f"ProcessingResult(success={self.success}, message='{self.message}', answer_count={self.answer_count})"


class DocumentProcessor:
    """
    Core business logic for solving an uploaded test.
    Orchestrates parsing, question extraction and answering under the
    configured time limits.
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        pipeline_config: Optional[PipelineConfig] = None,
        client: Optional[BaseLLMClient] = None,
        parser: Optional[BaseDocumentParser] = None,
        document_solver: Optional[DocumentSolver] = None
    ):
        """
        Initialize the document processor.

        Args:
            config: Service configuration (global config if None)
            pipeline_config: Stage configuration (loaded from env if None)
            client: LLM client shared by all stages and requests (created once
                from config on first use if None)
            parser: Parser override (chosen from the media type if None)
            document_solver: Solver override (created per request from SOLVER_MODE if None)
        """
        self.config = config or default_config
        self.pipeline_config = pipeline_config or PipelineConfig.from_env()
        self.client = client
        self.parser = parser
        self.document_solver = document_solver

    async def process_document(
        self,
        file_content: Union[bytes, BinaryIO],
        mime_type: str,
        filename: str = "upload"
    ) -> ProcessingResult:
        """
        Solve every question in an uploaded document.

        Args:
            file_content: Uploaded file as bytes or file-like object
            mime_type: Declared media type of the upload
            filename: Name of the uploaded file (for logging)

        Returns:
            ProcessingResult with answers or a user-facing error
        """
        try:
            if hasattr(file_content, "read"):
                file_content = file_content.read()

            logging.info(f"Processing file: {filename} ({mime_type}, {len(file_content)} bytes)")

            result = await asyncio.wait_for(
                self._process(file_content, mime_type, filename),
                timeout=self.config.request_timeout_seconds
            )

            logging.info(f"Successfully solved {len(result.answers)} questions from {filename}")

            return ProcessingResult(
                success=True,
                message=f"Successfully solved {len(result.answers)} questions",
                result=result
            )

        except SolverError as e:
            logging.warning(f"Could not process {filename}: {type(e).__name__}: {e.detail or e.user_message}")
            return ProcessingResult.failed(e)

        except asyncio.TimeoutError:
            logging.error(f"Processing {filename} exceeded {self.config.request_timeout_seconds}s")
            return ProcessingResult.failed(ProcessingTimeoutError("Request time limit exceeded"))

        except Exception as e:
            logging.error(f"Error processing document {filename}: {str(e)}", exc_info=True)
            return ProcessingResult.failed(SolverError(str(e)))

    async def _process(self, file_content: bytes, mime_type: str, filename: str) -> SolveResult:
        if not file_content:
            raise EmptyDocumentError("Uploaded file is empty")

        if len(file_content) > self.config.max_upload_bytes:
            raise DocumentTooLargeError(
                f"{len(file_content)} bytes exceeds limit of {self.config.max_upload_bytes}"
            )

        # Step 1: Parse the document into pages
        logging.info("Step 1: Extracting pages...")
        parsed = await self._parse(file_content, mime_type)

        if not parsed.has_content:
            raise EmptyDocumentError(f"No text could be extracted from {filename}")

        logging.info(f"Parsed {parsed.page_count} pages ({len(parsed.content)} characters of text)")

        # Step 2: Extract and answer questions
        logging.info(f"Step 2: Solving questions ({self.config.solver_mode} mode)...")
        solver = self._create_solver()
        result = await solver.solve(parsed.pages, filename=filename)

        if parsed.content:
            result.summary.language = detect_language(parsed.content)
            result.summary.text_direction = detect_language_direction(parsed.content)

        logging.info(f"Summary: {result.summary.to_dict()}")

        return result

    async def _parse(self, file_content: bytes, mime_type: str) -> ParsedDocument:
        parser = self.parser
        if parser is None:
            if not is_supported_media_type(mime_type):
                raise UnsupportedMediaTypeError(f"Unsupported media type: {mime_type or 'unknown'}")
            # A ValueError here is a bad DOCUMENT_PARSER setting, not a bad upload.
            parser = parser_for_media_type(mime_type, self.config.document_parser)

        try:
            return await asyncio.wait_for(
                asyncio.to_thread(parser.parse, file_content),
                timeout=self.config.parse_timeout_seconds
            )
        except asyncio.TimeoutError as e:
            raise ProcessingTimeoutError(
                f"Parsing exceeded {self.config.parse_timeout_seconds}s"
            ) from e
        except Exception as e:
            raise DocumentParseError(f"Parsing failed: {e}") from e

    def _llm_client(self) -> BaseLLMClient:
        if self.client is None:
            self.client = create_llm_client(self.pipeline_config.extractor)
        return self.client

    def _create_solver(self) -> DocumentSolver:
        if self.document_solver is not None:
            return self.document_solver
        factory = ExtractorFactory(client=self._llm_client())
        return factory.create_document_solver(self.config.solver_mode, self.pipeline_config)

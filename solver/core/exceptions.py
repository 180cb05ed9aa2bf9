"""
Document-level failures surfaced to the caller.

Per-batch and per-question failures never raise; they are recovered inside
the pipeline (see ExtractionBatchFailure / AnsweringFailure in the models).
Each class carries the message shown to the user and the HTTP status used by
the function app, so raw model or library errors never reach the response.
"""


class SolverError(Exception):
    """Base class for failures that abort a whole request."""

    user_message = "Failed to process the document. Please try again."
    status_code = 500

    def __init__(self, detail: str = None):
        super().__init__(detail or self.user_message)
        self.detail = detail


class EmptyDocumentError(SolverError):
    """No extractable text or pages in the upload."""

    user_message = (
        "No text could be extracted from the document. "
        "Please ensure it contains readable text."
    )
    status_code = 400


class DocumentTooLargeError(SolverError):
    """Upload exceeds the configured size limit."""

    user_message = "The file is too large. Please use a file smaller than 50MB."
    status_code = 413


class UnsupportedMediaTypeError(SolverError):
    """Upload is neither a PDF nor a supported image type."""

    user_message = "Unsupported file type. Please upload a PDF or an image."
    status_code = 415


class DocumentParseError(SolverError):
    """The document could not be parsed into pages."""

    user_message = "The file appears to be corrupted or uses an unsupported format."
    status_code = 422


class NoAnswersProducedError(SolverError):
    """The pipeline finished but produced zero answers."""

    user_message = "No questions could be found or answered in the document."
    status_code = 500


class ProcessingTimeoutError(SolverError, TimeoutError):
    """Wall-clock limit exceeded; no partial results are returned."""

    user_message = "Processing timed out. The file is too large or complex."
    status_code = 504

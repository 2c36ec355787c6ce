"""
Error types raised by docqa.

Ingestion catches everything below at the pipeline boundary and records
the message on the document. Query and service calls let them propagate
so the caller can map them to a response.
"""


class DocQAError(Exception):
    """Base class for all docqa errors."""


class UnsupportedFormat(DocQAError):
    """The declared file type has no extractor."""

    def __init__(self, file_type: str):
        self.file_type = file_type
        super().__init__(f"Unsupported file type: '{file_type}'")


class ExtractionFailed(DocQAError):
    """The file has a supported type but its content could not be decoded."""


class StorageUnavailable(DocQAError):
    """A record or file store read/write failed."""


class NotFound(DocQAError, LookupError):
    """A referenced document, session or file does not exist."""

    def __init__(self, kind: str, identifier: str):
        self.kind = kind
        self.identifier = identifier
        super().__init__(f"{kind} not found: {identifier}")


class InvalidRequest(DocQAError, ValueError):
    """Service input failed validation (empty question, oversize upload, ...)."""

"""
Exception hierarchy for the invoice pipeline.

Only ``InvalidInputError`` originates from the field extractor itself; the
rest belong to the AWS adapters and the orchestration around them.
"""


class InvoicePipelineError(Exception):
    """Base class for all pipeline errors."""


class InvalidInputError(InvoicePipelineError):
    """The OCR block collection is not list-shaped or a block has no BlockType."""


class InvalidEventError(InvoicePipelineError):
    """An S3 notification event carried no usable records."""


class DocumentValidationError(InvoicePipelineError):
    """The source document cannot be sent to document analysis."""


class UnsupportedFormatError(DocumentValidationError):
    pass


class FileTooLargeError(DocumentValidationError):
    pass


class DocumentNotFoundError(DocumentValidationError):
    pass


class DocumentAnalysisError(InvoicePipelineError):
    """Textract did not return a result after all retries."""


class AnalysisTimeoutError(DocumentAnalysisError):
    """A single Textract attempt exceeded its time budget."""


class StorageError(InvoicePipelineError):
    """Writing or reading an extracted invoice failed."""


class BackupError(InvoicePipelineError):
    """Copying recent raw invoices to the backup bucket failed."""

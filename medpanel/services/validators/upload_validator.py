"""
Validation utilities for uploaded documents.

Validators raise domain exceptions (not HTTPException) so the record
pipeline can turn a failure into a per-file notice and carry on with the
rest of the batch.
"""
import logging
from pathlib import Path
from typing import Iterable, List, Tuple

from medpanel.core.exceptions import EmptyFileError, FileTooLargeError
from medpanel.schemas.upload import UploadedDocument, UploadSource

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPE = "application/pdf"
PDF_EXTENSION = ".pdf"


def is_pdf_upload(document: UploadedDocument) -> bool:
    """Check whether the client declared the upload as a PDF."""
    return (document.content_type or "").split(";")[0].strip().lower() == PDF_CONTENT_TYPE


def has_pdf_extension(document: UploadedDocument) -> bool:
    """Check whether the filename ends in .pdf."""
    return Path(document.filename).suffix.lower() == PDF_EXTENSION


def validate_file_size(document: UploadedDocument, max_size: int) -> None:
    """
    Validate that the document size is within allowed limits.

    Raises:
        EmptyFileError: If the document has no content.
        FileTooLargeError: If the document exceeds max_size bytes.
    """
    size = len(document.data)
    if size == 0:
        logger.error("Empty file uploaded", extra={"upload": document.filename})
        raise EmptyFileError(filename=document.filename)

    if size > max_size:
        logger.error(
            "File exceeds maximum size",
            extra={"upload": document.filename, "size": size, "max_size": max_size},
        )
        raise FileTooLargeError(
            detail=f"File size exceeds maximum allowed size of {max_size / (1024 * 1024):.1f}MB",
            filename=document.filename,
            size=size,
        )


def filter_by_source(
    documents: Iterable[UploadedDocument],
    source: UploadSource,
) -> Tuple[List[UploadedDocument], List[UploadedDocument]]:
    """
    Apply the per-source file-type policy.

    Drag-and-drop only accepts uploads declared as application/pdf and
    silently skips the rest. The file picker accepts everything; non-PDFs
    then fail in the document loader and get a notice.

    Returns:
        (accepted, skipped)
    """
    accepted: List[UploadedDocument] = []
    skipped: List[UploadedDocument] = []
    for document in documents:
        if source is UploadSource.DROP and not is_pdf_upload(document):
            logger.info(
                "Skipping non-PDF drop",
                extra={"upload": document.filename, "content_type": document.content_type},
            )
            skipped.append(document)
        else:
            accepted.append(document)
    return accepted, skipped

"""
Record pipeline - runs an upload batch through every processing stage.

For each document, in upload order:

    size check -> DocumentLoader -> extract_fields -> (strict) validate
    -> merge_into -> SampleDataSynthesizer -> classify

Files are processed strictly one after another, and a session's batches
never interleave (each batch holds the session lock). A failure in one
file becomes a UserNotice and the batch moves on to the next file; state
merged from earlier files is kept.
"""
import logging
from typing import Iterable, Optional

from medpanel.core.config import settings
from medpanel.core.datetime_utils import utc_now
from medpanel.core.exceptions import ExtractionError, InvalidVitalError, UploadError
from medpanel.core.logging_config import document_context
from medpanel.schemas.upload import (
    GENERIC_ERROR_MESSAGE,
    BatchResult,
    DocumentResult,
    UploadedDocument,
    UploadSource,
    UserNotice,
)
from medpanel.services.document_loader import DocumentLoader
from medpanel.services.field_extractor import extract_fields, merge_into
from medpanel.services.health_classifier import classify
from medpanel.services.sample_synthesizer import SampleDataSynthesizer
from medpanel.services.session_store import MedicalSession
from medpanel.services.validators import filter_by_source, validate_file_size, validate_readings

logger = logging.getLogger(__name__)

# Errors that fail a single file without aborting the batch
PER_FILE_ERRORS = (ExtractionError, UploadError, InvalidVitalError)


class RecordPipelineService:
    """Processes upload batches into a session's medical record."""

    def __init__(
        self,
        loader: Optional[DocumentLoader] = None,
        strict_validation: Optional[bool] = None,
        max_size: Optional[int] = None,
    ):
        """
        Initialize the pipeline.

        Args:
            loader: Document loader to use. A default DocumentLoader is created if omitted.
            strict_validation: Reject implausible extracted vitals. Defaults to settings.strict_validation.
            max_size: Maximum document size in bytes. Defaults to settings.upload_max_size.
        """
        self.loader = loader or DocumentLoader()
        self.strict_validation = (
            settings.strict_validation if strict_validation is None else strict_validation
        )
        self.max_size = max_size if max_size is not None else settings.upload_max_size

    async def process_batch(
        self,
        session: MedicalSession,
        documents: Iterable[UploadedDocument],
        source: UploadSource = UploadSource.PICKER,
    ) -> BatchResult:
        """
        Process a batch of uploaded documents into the session record.

        Drag-and-drop batches are filtered to PDFs first; skipped files are
        reported but produce no notice.

        Returns:
            BatchResult with one DocumentResult per accepted file, one notice
            per failed file, and the names of skipped files.
        """
        accepted, skipped = filter_by_source(documents, source)
        result = BatchResult(
            session_id=session.session_id,
            skipped=[doc.filename for doc in skipped],
        )

        async with session.lock:
            logger.info(
                "Processing upload batch",
                extra={
                    "session_id": session.session_id,
                    "source": source.value,
                    "files": len(accepted),
                    "skipped": len(skipped),
                },
            )
            for document in accepted:
                with document_context(document.filename):
                    try:
                        result.documents.append(await self.process_document(session, document))
                    except PER_FILE_ERRORS as e:
                        logger.warning(
                            "Document failed",
                            extra={"error_type": e.__class__.__name__, "detail": e.detail},
                        )
                        result.documents.append(
                            DocumentResult(
                                filename=document.filename,
                                status="failed",
                                size_bytes=document.size,
                            )
                        )
                        result.notices.append(UserNotice(
                            filename=document.filename,
                            message=GENERIC_ERROR_MESSAGE,
                            detail=e.detail,
                            error_type=e.__class__.__name__,
                        ))

            session.notices = list(result.notices)

        logger.info(
            "Upload batch finished",
            extra={
                "session_id": session.session_id,
                "processed": result.processed_count,
                "failed": len(result.notices),
            },
        )
        return result

    async def process_document(
        self,
        session: MedicalSession,
        document: UploadedDocument,
    ) -> DocumentResult:
        """
        Run one document through every stage.

        The record is only touched once the document has been read and
        validated, so a failing file leaves it as it was.

        Raises:
            UploadError: If the document is empty or too large.
            ExtractionError: If the PDF cannot be read or times out.
            InvalidVitalError: In strict mode, if an extracted value is implausible.
        """
        validate_file_size(document, self.max_size)

        text = await self.loader.load(document.data, document.filename)
        fields = extract_fields(text)

        if self.strict_validation:
            validate_readings(fields.readings())

        record = session.record
        merge_into(record, fields, source_document=document.filename, observed_at=utc_now())

        synthesizer = SampleDataSynthesizer(rng=session.rng)
        synthesized = synthesizer.fill_missing_vitals(record)
        synthesizer.generate_trends(record)

        assessment = classify(record.vitals)

        logger.info(
            "Document processed",
            extra={
                "extracted": fields.found,
                "synthesized": [kind.value for kind in synthesized],
                "medications": len(record.medications),
            },
        )
        return DocumentResult(
            filename=document.filename,
            status="processed",
            size_bytes=document.size,
            extracted=fields.found,
            synthesized=[kind.value for kind in synthesized],
            cardiovascular_risk=assessment.cardiovascular_risk.label,
        )


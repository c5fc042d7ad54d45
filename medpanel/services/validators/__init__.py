"""
Validators for uploads and extracted vitals.
"""
from medpanel.services.validators.upload_validator import (
    PDF_CONTENT_TYPE,
    filter_by_source,
    has_pdf_extension,
    is_pdf_upload,
    validate_file_size,
)
from medpanel.services.validators.vital_validator import (
    validate_reading,
    validate_readings,
)

__all__ = [
    "PDF_CONTENT_TYPE",
    "filter_by_source",
    "has_pdf_extension",
    "is_pdf_upload",
    "validate_file_size",
    "validate_reading",
    "validate_readings",
]

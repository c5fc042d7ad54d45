"""
Pydantic schemas for document upload operations.
"""
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

GENERIC_ERROR_MESSAGE = "Error processing PDF file. Please try again."


class UploadSource(str, Enum):
    """How the user selected the files."""
    PICKER = "picker"
    DROP = "drop"


@dataclass
class UploadedDocument:
    """One uploaded file, fully read into memory."""
    filename: str
    content_type: Optional[str]
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


class UserNotice(BaseModel):
    """A blocking notice the client shows to the user for one failed file."""
    filename: str = Field(..., description="File the notice is about", example="scan.pdf")
    message: str = Field(..., description="User-facing message", example=GENERIC_ERROR_MESSAGE)
    detail: Optional[str] = Field(None, description="Technical detail from the failing stage")
    error_type: str = Field(..., description="Exception class that caused the notice", example="ExtractionError")


class DocumentResult(BaseModel):
    """Outcome of one file in a batch."""
    filename: str = Field(..., description="Original filename")
    status: str = Field(..., description="'processed' or 'failed'", example="processed")
    extracted: List[str] = Field(
        default_factory=list,
        description="Extraction rules that matched in this document",
        example=["blood_pressure", "medications"],
    )
    synthesized: List[str] = Field(
        default_factory=list,
        description="Vitals filled with placeholder data after this document",
        example=["glucose"],
    )
    size_bytes: int = Field(0, ge=0, description="Size of the uploaded file in bytes", example=48213)
    cardiovascular_risk: Optional[str] = Field(
        None, description="Cardiovascular risk after merging this document", example="Medium"
    )


class BatchResult(BaseModel):
    """Result of processing one upload batch, in upload order."""
    session_id: str = Field(..., description="Session the batch was merged into")
    documents: List[DocumentResult] = Field(default_factory=list)
    notices: List[UserNotice] = Field(default_factory=list)
    skipped: List[str] = Field(
        default_factory=list,
        description="Files ignored by the drag-and-drop PDF filter",
    )

    @property
    def processed_count(self) -> int:
        return sum(1 for doc in self.documents if doc.status == "processed")

    class Config:
        json_schema_extra = {
            "example": {
                "session_id": "3f2b8c1e9a7d4f6b8e0c2d4a6b8c0e2f",
                "documents": [
                    {
                        "filename": "checkup.pdf",
                        "status": "processed",
                        "extracted": ["blood_pressure", "medications"],
                        "synthesized": ["cholesterol", "glucose", "bmi"],
                        "cardiovascular_risk": "Medium",
                    },
                    {"filename": "broken.pdf", "status": "failed", "extracted": [], "synthesized": []},
                ],
                "notices": [
                    {
                        "filename": "broken.pdf",
                        "message": GENERIC_ERROR_MESSAGE,
                        "detail": "Could not extract text from PDF 'broken.pdf': no objects found",
                        "error_type": "ExtractionError",
                    }
                ],
                "skipped": [],
            }
        }

"""
Pydantic models for the document analyzer API.

Field names are snake_case in Python and camelCase on the wire.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serializing with camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(default="healthy")
    message: str = Field(default="")
    version: str = Field(default="1.0.0")


class MessageResponse(BaseModel):
    """Generic status message."""

    message: str = Field(..., description="Status message")


# =============================================================================
# Authentication Models
# =============================================================================


class RegisterRequest(CamelModel):
    """Request model for creating an account."""

    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=6, max_length=72)
    confirm_password: str = Field(..., description="Must equal password")


class LoginRequest(CamelModel):
    """Request model for signing in."""

    email: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1)


class AuthResponse(CamelModel):
    """Bearer token issued after registration or login."""

    token: str = Field(..., description="Bearer access token")
    email: str = Field(..., description="Account email")
    expires_at: str = Field(..., description="Token expiry (ISO format)")


# =============================================================================
# Document Models
# =============================================================================


class DocumentAnalysisResponse(CamelModel):
    """Structured analysis attached to a document."""

    id: str = Field(..., description="Analysis ID (UUID)")
    project_name: str | None = None
    project_duration: str | None = None
    human_resources_hierarchy: str | None = None
    project_stages: str | None = None
    special_conditions: str | None = None
    implementation_boundaries: str | None = None
    analyzed_at: str = Field(..., description="Analysis timestamp (ISO format)")


class DocumentResponse(CamelModel):
    """An uploaded document and its analysis, if any."""

    id: str = Field(..., description="Document ID (UUID)")
    file_name: str = Field(..., description="Original filename")
    content_type: str = Field(..., description="Declared MIME type")
    file_size: int = Field(..., ge=0, description="Size in bytes")
    uploaded_at: str = Field(..., description="Upload timestamp (ISO format)")
    analysis: DocumentAnalysisResponse | None = Field(
        default=None,
        description="Analysis result (if the document has been analyzed)",
    )


class AnalyzeDocumentsRequest(CamelModel):
    """Request model for analyzing a batch of documents."""

    document_ids: list[str] = Field(
        default_factory=list,
        description="IDs of the caller's documents to analyze together",
    )

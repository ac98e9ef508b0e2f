"""
Router for document endpoints.

Handles:
- Listing the caller's documents with their analyses
- Upload (limited per user)
- Batch analysis with the language model
- Deletion
"""

import logging
import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, File, HTTPException, Response, UploadFile, status
from sqlalchemy.orm import Session

from ..config import Settings, get_settings
from ..database import get_db
from ..models import (
    AnalyzeDocumentsRequest,
    DocumentAnalysisResponse,
    DocumentResponse,
    MessageResponse,
)
from ..models_db import Document, User
from ..security import get_current_user
from ..services.ai import AnalysisRequester, get_analysis_requester
from ..services.analysis_service import AnalysisOrchestrator
from ..services.document_service import create_document, delete_document, list_documents
from ..services.storage import DocumentStorage, get_document_storage
from ..services.text_extractor import TextExtractor, get_text_extractor

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/documents", tags=["documents"])


def to_document_response(document: Document) -> DocumentResponse:
    """Convert a Document row (and its analysis) to the API model."""
    analysis = None
    if document.analysis is not None:
        a = document.analysis
        analysis = DocumentAnalysisResponse(
            id=str(a.id),
            project_name=a.project_name,
            project_duration=a.project_duration,
            human_resources_hierarchy=a.human_resources_hierarchy,
            project_stages=a.project_stages,
            special_conditions=a.special_conditions,
            implementation_boundaries=a.implementation_boundaries,
            analyzed_at=a.analyzed_at.isoformat(),
        )

    return DocumentResponse(
        id=str(document.id),
        file_name=document.filename,
        content_type=document.content_type,
        file_size=document.file_size,
        uploaded_at=document.uploaded_at.isoformat(),
        analysis=analysis,
    )


def _parse_document_ids(raw_ids: list[str]) -> list[uuid.UUID]:
    """Parse requested ids; malformed ones can never resolve and are dropped."""
    parsed = []
    for raw in raw_ids:
        try:
            parsed.append(uuid.UUID(str(raw)))
        except ValueError:
            logger.info("Ignoring malformed document id %r", raw)
    return parsed


@router.get("", response_model=list[DocumentResponse])
async def get_documents(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[DocumentResponse]:
    """List the caller's documents, newest first."""
    documents = list_documents(db, current_user.id)
    return [to_document_response(doc) for doc in documents]


@router.post("/upload", response_model=DocumentResponse)
async def upload_document(
    file: Annotated[UploadFile, File(description="PDF or Word document")],
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    storage: DocumentStorage = Depends(get_document_storage),
    settings: Settings = Depends(get_settings),
) -> DocumentResponse:
    """
    Upload a single project document.

    Only PDF, .docx and .doc uploads are accepted, and each user may keep
    at most ``max_documents_per_user`` documents.
    """
    if not file.filename:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No filename provided",
        )

    try:
        content = await file.read()
        document = create_document(
            db,
            owner=current_user,
            filename=file.filename,
            content_type=file.content_type,
            content=content,
            storage=storage,
            max_documents=settings.max_documents_per_user,
        )
    finally:
        await file.close()

    return to_document_response(document)


@router.post("/analyze", response_model=MessageResponse)
async def analyze_documents(
    payload: AnalyzeDocumentsRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    extractor: TextExtractor = Depends(get_text_extractor),
    requester: AnalysisRequester = Depends(get_analysis_requester),
) -> MessageResponse:
    """
    Analyze the given documents together with a single model request.

    Documents that fail extraction or parsing are skipped; the batch
    still succeeds once the model has answered.
    """
    orchestrator = AnalysisOrchestrator(db, extractor, requester)
    outcome = await orchestrator.analyze_batch(
        _parse_document_ids(payload.document_ids),
        current_user.id,
    )

    logger.info(
        "User %s analyzed %d document(s), %d analyses saved",
        current_user.id,
        outcome.documents_resolved,
        outcome.analyses_saved,
    )
    return MessageResponse(message="Analysis completed successfully")


@router.delete("/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_document(
    document_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    storage: DocumentStorage = Depends(get_document_storage),
) -> Response:
    """Delete a document, its analysis and its stored file."""
    try:
        doc_uuid = uuid.UUID(document_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid document ID format",
        )

    delete_document(db, owner_id=current_user.id, document_id=doc_uuid, storage=storage)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

"""
Document lifecycle operations: upload with quota, listing and deletion.
"""

import logging
import uuid

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from ..models_db import Document, User
from .exceptions import NotFoundError, ServiceValidationError
from .storage import DocumentStorage
from .text_extractor import is_supported_content_type, normalize_content_type

logger = logging.getLogger(__name__)


def count_documents(db: Session, owner_id: uuid.UUID) -> int:
    """Number of documents currently owned by a user."""
    return (
        db.query(func.count(Document.id))
        .filter(Document.user_id == owner_id)
        .scalar()
    )


def create_document(
    db: Session,
    *,
    owner: User,
    filename: str,
    content_type: str | None,
    content: bytes,
    storage: DocumentStorage,
    max_documents: int = 10,
) -> Document:
    """
    Store an upload and record it for its owner.

    The owner row is locked before counting so the quota check and the
    insert happen in one transaction.

    Raises:
        ServiceValidationError: Unsupported content type, empty file, or
            the owner is already at ``max_documents``.
    """
    if not is_supported_content_type(content_type):
        raise ServiceValidationError("Only PDF and Word documents are allowed")

    if not content:
        raise ServiceValidationError("Empty file provided")

    # Serializes concurrent uploads by the same user (no-op on SQLite)
    db.query(User).filter(User.id == owner.id).with_for_update().one()

    if count_documents(db, owner.id) >= max_documents:
        db.rollback()
        raise ServiceValidationError(
            f"Maximum of {max_documents} documents allowed per user"
        )

    path = storage.save(owner.id, filename, content)
    document = Document(
        user_id=owner.id,
        filename=filename,
        file_path=str(path),
        content_type=normalize_content_type(content_type),
        file_size=len(content),
    )
    db.add(document)

    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        storage.delete(path)
        raise

    db.refresh(document)
    logger.info(
        "Uploaded document %s (%s, %d bytes) for user %s",
        document.id,
        document.filename,
        document.file_size,
        owner.id,
    )
    return document


def list_documents(db: Session, owner_id: uuid.UUID) -> list[Document]:
    """The user's documents with their analyses, newest first."""
    return (
        db.query(Document)
        .options(selectinload(Document.analysis))
        .filter(Document.user_id == owner_id)
        .order_by(Document.uploaded_at.desc())
        .all()
    )


def delete_document(
    db: Session,
    *,
    owner_id: uuid.UUID,
    document_id: uuid.UUID,
    storage: DocumentStorage,
) -> None:
    """
    Delete a document, its analysis and its stored file.

    Raises:
        NotFoundError: If the document does not exist or belongs to someone else.
    """
    document = (
        db.query(Document)
        .filter(Document.id == document_id, Document.user_id == owner_id)
        .first()
    )
    if document is None:
        raise NotFoundError(f"Document {document_id} not found")

    file_path = document.file_path
    db.delete(document)
    db.commit()

    storage.delete(file_path)
    logger.info("Deleted document %s for user %s", document_id, owner_id)

"""
SQLAlchemy database models for the document analyzer.

This module defines the ORM models for persisting users, uploaded
documents and their model-generated analyses.
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import (
    BigInteger,
    DateTime,
    ForeignKey,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .database import Base


class User(Base):
    """
    An account that owns uploaded documents.

    Passwords are stored as bcrypt hashes only.
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
    )
    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        nullable=False,
    )

    # Relationships
    documents: Mapped[list["Document"]] = relationship(
        "Document",
        back_populates="user",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}')>"


class Document(Base):
    """
    A single uploaded project document.

    The file itself lives in upload storage; the row keeps its metadata.
    Documents are immutable once uploaded, apart from their analysis.
    """

    __tablename__ = "documents"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    filename: Mapped[str] = mapped_column(
        String(512),
        nullable=False,
    )
    file_path: Mapped[str] = mapped_column(
        String(1024),
        nullable=False,
        comment="Location of the stored upload",
    )
    content_type: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    file_size: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
        default=0,
    )
    uploaded_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        nullable=False,
    )

    # Relationships
    user: Mapped[User] = relationship(
        "User",
        back_populates="documents",
    )
    analysis: Mapped[Optional["DocumentAnalysis"]] = relationship(
        "DocumentAnalysis",
        back_populates="document",
        cascade="all, delete-orphan",
        uselist=False,
    )

    def __repr__(self) -> str:
        return f"<Document(id={self.id}, filename='{self.filename}')>"


class DocumentAnalysis(Base):
    """
    Structured summary of a document produced by the language model.

    Holds the six summary fields (any of which may be missing) and the
    verbatim model answer they were parsed from.
    """

    __tablename__ = "document_analyses"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    document_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("documents.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    )
    project_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    project_duration: Mapped[str | None] = mapped_column(Text, nullable=True)
    human_resources_hierarchy: Mapped[str | None] = mapped_column(Text, nullable=True)
    project_stages: Mapped[str | None] = mapped_column(Text, nullable=True)
    special_conditions: Mapped[str | None] = mapped_column(Text, nullable=True)
    implementation_boundaries: Mapped[str | None] = mapped_column(Text, nullable=True)
    raw_analysis: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
        comment="Verbatim model response",
    )
    analyzed_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        nullable=False,
    )

    # Relationships
    document: Mapped[Document] = relationship(
        "Document",
        back_populates="analysis",
    )

    def __repr__(self) -> str:
        return f"<DocumentAnalysis(id={self.id}, document_id={self.document_id})>"

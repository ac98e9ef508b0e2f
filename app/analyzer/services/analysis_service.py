"""
Batch analysis of uploaded documents.

Sequences text extraction, a single language model request for the
whole batch, and per-document parsing and persistence. A failure for one
document is logged and never aborts the rest of the batch.
"""

import asyncio
import logging
import uuid
from collections.abc import Iterable
from datetime import datetime

from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..models_db import Document, DocumentAnalysis
from .ai import AnalysisParseError, AnalysisRequester, parse_analysis_response
from .exceptions import NoDocumentsFoundError
from .text_extractor import TextExtractionError, TextExtractor

logger = logging.getLogger(__name__)


class AnalysisOutcome(BaseModel):
    """Counts describing a completed batch."""

    documents_resolved: int
    documents_extracted: int
    analyses_saved: int
    raw_output: str


def format_document_section(filename: str, text: str) -> str:
    """Header line, document text and a blank separator line."""
    return f"--- Document: {filename} ---\n{text}\n\n"


class AnalysisOrchestrator:
    """Runs one analysis batch for one user."""

    def __init__(
        self,
        db: Session,
        extractor: TextExtractor,
        requester: AnalysisRequester,
    ):
        self.db = db
        self.extractor = extractor
        self.requester = requester

    def resolve_documents(
        self, document_ids: Iterable[uuid.UUID], owner_id: uuid.UUID
    ) -> list[Document]:
        """
        Load the requested documents owned by ``owner_id``.

        Unknown or foreign ids are dropped. Duplicates are ignored and the
        requested order is kept.
        """
        ordered_ids = list(dict.fromkeys(document_ids))
        if not ordered_ids:
            return []

        rows = (
            self.db.query(Document)
            .filter(Document.id.in_(ordered_ids))
            .filter(Document.user_id == owner_id)
            .all()
        )
        by_id = {doc.id: doc for doc in rows}

        dropped = len(ordered_ids) - len(by_id)
        if dropped:
            logger.info("Dropped %d unknown or foreign document id(s) from batch", dropped)

        return [by_id[doc_id] for doc_id in ordered_ids if doc_id in by_id]

    async def analyze_batch(
        self, document_ids: Iterable[uuid.UUID], owner_id: uuid.UUID
    ) -> AnalysisOutcome:
        """
        Analyze a batch of documents with a single model request.

        Args:
            document_ids: IDs requested by the caller.
            owner_id: The caller; only their documents are analyzed.

        Returns:
            AnalysisOutcome with per-batch counts.

        Raises:
            NoDocumentsFoundError: If none of the ids resolve. No model call is made.
            UpstreamUnavailableError: If the model request fails.
        """
        documents = self.resolve_documents(document_ids, owner_id)
        if not documents:
            raise NoDocumentsFoundError("No documents found")

        sections: list[str] = []
        for doc in documents:
            try:
                text = await asyncio.to_thread(
                    self.extractor.extract, doc.file_path, doc.content_type
                )
            except TextExtractionError:
                logger.exception("Error extracting text from document %s", doc.id)
                continue
            sections.append(format_document_section(doc.filename, text))

        if not sections:
            logger.warning(
                "No text extracted from any of %d document(s); analyzing empty input",
                len(documents),
            )

        raw_output = await self.requester.request_analysis("".join(sections))

        saved = 0
        for doc in documents:
            if self.save_analysis(doc, raw_output) is not None:
                saved += 1

        logger.info(
            "Batch analysis completed: %d document(s), %d extracted, %d analyses saved",
            len(documents),
            len(sections),
            saved,
        )
        return AnalysisOutcome(
            documents_resolved=len(documents),
            documents_extracted=len(sections),
            analyses_saved=saved,
            raw_output=raw_output,
        )

    def save_analysis(self, doc: Document, raw_output: str) -> DocumentAnalysis | None:
        """
        Parse the shared model output and store it as this document's analysis.

        An existing analysis is replaced. Each document is committed on its
        own, so a failure here leaves other documents untouched.

        Returns:
            The stored analysis, or None if parsing or saving failed.
        """
        try:
            fields = parse_analysis_response(raw_output)
        except AnalysisParseError as e:
            logger.warning("Error parsing analysis for document %s: %s", doc.id, e)
            return None

        try:
            if doc.analysis is not None:
                logger.info("Replacing existing analysis for document %s", doc.id)
                doc.analysis = None
                self.db.flush()

            analysis = DocumentAnalysis(
                document_id=doc.id,
                raw_analysis=raw_output,
                analyzed_at=datetime.utcnow(),
                **fields.model_dump(),
            )
            doc.analysis = analysis
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Error saving analysis for document %s", doc.id)
            return None

        return analysis

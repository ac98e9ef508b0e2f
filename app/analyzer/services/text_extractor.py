"""
Text extraction service for uploaded documents.

Reads PDF documents with pypdf and Word (.docx) documents with python-docx,
producing plain text for the language model.
"""

import logging
from pathlib import Path

from docx import Document as open_docx
from pypdf import PdfReader
from pypdf.errors import PdfReadError

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPE = "application/pdf"
DOCX_CONTENT_TYPE = (
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
)
DOC_CONTENT_TYPE = "application/msword"

SUPPORTED_CONTENT_TYPES = frozenset(
    {PDF_CONTENT_TYPE, DOCX_CONTENT_TYPE, DOC_CONTENT_TYPE}
)

# Office Open XML packages are ZIP archives
_ZIP_SIGNATURE = b"PK\x03\x04"


class TextExtractionError(Exception):
    """Base class for text extraction failures."""

    pass


class UnsupportedFormatError(TextExtractionError):
    """Raised when a content type has no extraction path."""

    pass


class ExtractionFailedError(TextExtractionError):
    """Raised when a supported document cannot be read."""

    def __init__(self, message: str, page: int | None = None):
        super().__init__(message)
        self.page = page


def normalize_content_type(content_type: str | None) -> str:
    """Lower-case a declared content type and drop any parameters."""
    if not content_type:
        return ""
    return content_type.split(";", 1)[0].strip().lower()


def is_supported_content_type(content_type: str | None) -> bool:
    """Check whether uploads of this content type are accepted."""
    return normalize_content_type(content_type) in SUPPORTED_CONTENT_TYPES


class TextExtractor:
    """
    Service for turning stored documents into plain text.

    Extraction is read-only and CPU-bound; callers in async code should run
    it on a worker thread.
    """

    def extract(self, path: Path | str, content_type: str | None) -> str:
        """
        Extract plain text from a stored document.

        Args:
            path: Location of the stored file.
            content_type: Declared MIME type of the upload.

        Returns:
            The document text.

        Raises:
            UnsupportedFormatError: If the content type cannot be extracted.
            ExtractionFailedError: If the file cannot be read.
        """
        kind = normalize_content_type(content_type)

        if kind == PDF_CONTENT_TYPE:
            return self.extract_pdf(path)
        if kind == DOCX_CONTENT_TYPE:
            return self.extract_docx(path)
        if kind == DOC_CONTENT_TYPE:
            return self.extract_legacy_doc(path)

        raise UnsupportedFormatError(f"File type {content_type} is not supported")

    def extract_pdf(self, path: Path | str) -> str:
        """
        Extract the text of every page, in order, one line break between pages.

        Raises:
            ExtractionFailedError: If the PDF or one of its pages cannot be read.
        """
        try:
            reader = PdfReader(path)
            page_count = len(reader.pages)
        except (PdfReadError, OSError) as e:
            logger.error("Could not open PDF %s: %s", path, e)
            raise ExtractionFailedError(f"Invalid or unreadable PDF file: {e}") from e
        except Exception as e:
            logger.exception("Unexpected error opening PDF %s", path)
            raise ExtractionFailedError(f"PDF could not be read: {e}") from e

        logger.info("Extracting text from PDF %s (%d pages)", path, page_count)

        pages: list[str] = []
        for page_number in range(1, page_count + 1):
            try:
                page_text = reader.pages[page_number - 1].extract_text()
            except Exception as e:
                logger.exception("Text extraction failed on page %d of %s", page_number, path)
                raise ExtractionFailedError(
                    f"Could not extract text from page {page_number}: {e}",
                    page=page_number,
                ) from e
            pages.append(page_text or "")

        return "\n".join(pages)

    def extract_docx(self, path: Path | str) -> str:
        """
        Extract the text of every body paragraph, one paragraph per line.

        Raises:
            ExtractionFailedError: If the file is not a readable Word package.
        """
        try:
            document = open_docx(str(path))
        except Exception as e:
            logger.error("Could not open Word document %s: %s", path, e)
            raise ExtractionFailedError(f"Invalid or unreadable Word document: {e}") from e

        paragraphs = [paragraph.text for paragraph in document.paragraphs]
        logger.info("Extracted %d paragraph(s) from %s", len(paragraphs), path)
        return "\n".join(paragraphs)

    def extract_legacy_doc(self, path: Path | str) -> str:
        """
        Extract text from a file declared as legacy ``application/msword``.

        Files that are really Office Open XML packages are read as .docx.
        Genuine binary .doc files are rejected rather than misparsed.
        """
        try:
            with open(path, "rb") as f:
                header = f.read(len(_ZIP_SIGNATURE))
        except OSError as e:
            raise ExtractionFailedError(f"Could not read document: {e}") from e

        if header == _ZIP_SIGNATURE:
            logger.info("Legacy .doc upload %s is an OOXML package, reading as .docx", path)
            return self.extract_docx(path)

        raise UnsupportedFormatError(
            "Legacy binary .doc files are not supported; save the document as .docx"
        )


def get_text_extractor() -> TextExtractor:
    """Dependency providing a text extractor."""
    return TextExtractor()

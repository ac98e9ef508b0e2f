"""Pytest configuration and fixtures."""

import os
import tempfile
from collections.abc import Callable, Generator
from pathlib import Path

# Point the application at throwaway resources before it is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="analyzer-uploads-"))

import pytest
from docx import Document as DocxDocument
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.analyzer.config import Settings, get_settings
from app.analyzer.database import Base, get_db
from app.analyzer.main import app
from app.analyzer.models_db import Document, User
from app.analyzer.services.ai import get_analysis_requester
from app.analyzer.services.text_extractor import PDF_CONTENT_TYPE

SAMPLE_ANALYSIS = """Here is the analysis you asked for:
{
  "projectName": "Apollo Data Platform",
  "projectDuration": "18 months",
  "humanResourcesHierarchy": "Sponsor > Programme Manager > Tech Leads > Engineers",
  "projectStages": "Discovery, Build, Rollout",
  "specialConditions": "On-premise hosting only",
  "implementationBoundaries": "ITIL change management, ISO 27001"
}
Let me know if you need anything else."""


class FakeAnalysisRequester:
    """Stands in for the remote model; records every combined input."""

    def __init__(self, response: str = SAMPLE_ANALYSIS, error: Exception | None = None):
        self.response = response
        self.error = error
        self.calls: list[str] = []

    async def request_analysis(self, combined_text: str) -> str:
        self.calls.append(combined_text)
        if self.error is not None:
            raise self.error
        return self.response


def build_pdf(pages: list[str]) -> bytes:
    """
    Build a small valid PDF with one line of Helvetica text per page.

    Object layout: 1 catalog, 2 page tree, 3 font, then a page object and
    a content stream per page.
    """
    kids = " ".join(f"{4 + 2 * i} 0 R" for i in range(len(pages)))
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        f"<< /Type /Pages /Kids [{kids}] /Count {len(pages)} >>".encode(),
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]
    for i, text in enumerate(pages):
        objects.append(
            (
                "<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
                "/Resources << /Font << /F1 3 0 R >> >> "
                f"/Contents {5 + 2 * i} 0 R >>"
            ).encode()
        )
        stream = f"BT /F1 12 Tf 72 720 Td ({text}) Tj ET".encode()
        objects.append(
            f"<< /Length {len(stream)} >>\nstream\n".encode() + stream + b"\nendstream"
        )

    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += f"{number} 0 obj\n".encode() + body + b"\nendobj\n"

    xref_offset = len(out)
    out += f"xref\n0 {len(objects) + 1}\n".encode()
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += f"{offset:010d} 00000 n \n".encode()
    out += (
        f"trailer\n<< /Size {len(objects) + 1} /Root 1 0 R >>\n"
        f"startxref\n{xref_offset}\n%%EOF\n"
    ).encode()
    return bytes(out)


def build_docx(path: Path, paragraphs: list[str]) -> Path:
    """Write a .docx file with one paragraph per entry."""
    document = DocxDocument()
    for text in paragraphs:
        document.add_paragraph(text)
    document.save(str(path))
    return path


@pytest.fixture
def sample_pdf_bytes() -> bytes:
    """A two-page PDF with text on each page."""
    return build_pdf(["Project Apollo charter", "Stage two rollout plan"])


@pytest.fixture
def sample_pdf_path(tmp_path: Path, sample_pdf_bytes: bytes) -> Path:
    path = tmp_path / "charter.pdf"
    path.write_bytes(sample_pdf_bytes)
    return path


@pytest.fixture
def sample_docx_path(tmp_path: Path) -> Path:
    return build_docx(
        tmp_path / "plan.docx",
        ["Project Apollo", "Duration: 18 months", "Stages: Discovery, Build"],
    )


@pytest.fixture
def invalid_file_bytes() -> bytes:
    """Create invalid (non-PDF) file bytes for testing."""
    return b"This is not a PDF file"


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    return Settings(
        database_url="sqlite://",
        upload_dir=tmp_path / "uploads",
        jwt_secret="test-secret",
        bcrypt_rounds=4,
        llm_api_key=None,
    )


@pytest.fixture
def engine():
    """In-memory database shared by every session of one test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(engine) -> Generator[Session, None, None]:
    session = sessionmaker(bind=engine, autoflush=False)()
    yield session
    session.close()


@pytest.fixture
def fake_requester() -> FakeAnalysisRequester:
    return FakeAnalysisRequester()


@pytest.fixture
def client(
    db_session: Session,
    test_settings: Settings,
    fake_requester: FakeAnalysisRequester,
) -> Generator[TestClient, None, None]:
    """Create a test client wired to the test database, settings and model."""

    def _get_db():
        yield db_session

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_analysis_requester] = lambda: fake_requester

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def register_user(client: TestClient) -> Callable[..., dict[str, str]]:
    """Register an account through the API and return its auth headers."""

    def _register(email: str = "owner@example.com", password: str = "s3cret-pass") -> dict[str, str]:
        response = client.post(
            "/api/auth/register",
            json={"email": email, "password": password, "confirmPassword": password},
        )
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['token']}"}

    return _register


@pytest.fixture
def auth_headers(register_user) -> dict[str, str]:
    return register_user()


@pytest.fixture
def user(db_session: Session) -> User:
    owner = User(email="analyst@example.com", password_hash="not-a-real-hash")
    db_session.add(owner)
    db_session.commit()
    return owner


@pytest.fixture
def make_document(db_session: Session, tmp_path: Path) -> Callable[..., Document]:
    """Store a file on disk and create its Document row."""

    def _make(
        owner: User,
        filename: str,
        content: bytes,
        content_type: str = PDF_CONTENT_TYPE,
    ) -> Document:
        path = tmp_path / filename
        path.write_bytes(content)
        document = Document(
            user_id=owner.id,
            filename=filename,
            file_path=str(path),
            content_type=content_type,
            file_size=len(content),
        )
        db_session.add(document)
        db_session.commit()
        return document

    return _make


@pytest.fixture
def docx_bytes(tmp_path: Path) -> bytes:
    path = build_docx(tmp_path / "scope.docx", ["Scope statement", "Governance: ITIL"])
    return path.read_bytes()

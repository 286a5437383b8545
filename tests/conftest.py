"""
Shared test fixtures and configuration for entire test suite.

Provides: file-backed SQLite store, session factory, artifact store,
background runner, pipeline, and a document factory.
Dependencies: pytest, pytest-asyncio, sqlalchemy, aiosqlite
System role: Test infrastructure and fixture management
"""

from pathlib import Path

import pytest

from knowledge_base.boundary.db import (
    DocumentStatus,
    get_async_engine,
    get_async_session_factory,
    init_models,
)
from knowledge_base.boundary.db.CRUD.document_crud import document_crud
from knowledge_base.boundary.storage import LocalFileStore
from knowledge_base.configs.database import DatabaseSettings
from knowledge_base.configs.ingestion import DocumentPipelineSettings
from knowledge_base.configs.retrieval import RetrievalSettings
from knowledge_base.core.document_processing import BackgroundTaskRunner, DocumentPipeline
from knowledge_base.core.document_processing.tasks import compute_content_hash


@pytest.fixture
async def engine(tmp_path: Path):
    """
    Create a SQLite database file for one test.

    A file (not :memory:) so background tasks can open their own
    connections and see committed rows.
    """
    db_settings = DatabaseSettings(url=f"sqlite+aiosqlite:///{tmp_path / 'kb.db'}")
    engine = get_async_engine(db_settings)
    await init_models(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    """Session factory bound to the test database."""
    return get_async_session_factory(engine)


@pytest.fixture
def documents_dir(tmp_path: Path) -> Path:
    return tmp_path / "documents"


@pytest.fixture
def file_store(documents_dir: Path) -> LocalFileStore:
    return LocalFileStore(documents_dir)


@pytest.fixture
def ingestion_settings(documents_dir: Path) -> DocumentPipelineSettings:
    return DocumentPipelineSettings(documents_dir=str(documents_dir))


@pytest.fixture
def retrieval_settings() -> RetrievalSettings:
    return RetrievalSettings()


@pytest.fixture
def task_runner() -> BackgroundTaskRunner:
    return BackgroundTaskRunner()


@pytest.fixture
async def pipeline(session_factory, file_store, ingestion_settings, task_runner):
    """Initialized DocumentPipeline writing into tmp_path."""
    pipeline = DocumentPipeline(
        session_factory,
        file_store=file_store,
        settings=ingestion_settings,
        task_runner=task_runner,
    )
    await pipeline.initialize()
    yield pipeline
    await task_runner.drain()


@pytest.fixture
def make_document(session_factory):
    """
    Factory inserting a document row directly, bypassing the pipeline.

    Returns:
        Callable: async (title, content, **fields) -> DocumentModel
    """

    async def _make(title: str, content: str, **fields):
        values = {
            "title": title,
            "filename": fields.pop("filename", f"{title.lower().replace(' ', '-')}.txt"),
            "content": content,
            "file_size": len(content.encode("utf-8")),
            "file_hash": compute_content_hash(f"{title}\0{content}".encode("utf-8")),
            "processing_status": DocumentStatus.COMPLETED,
            "is_processed": True,
        }
        values.update(fields)
        async with session_factory() as db:
            document = await document_crud.create(db, **values)
            await db.commit()
        return document

    return _make

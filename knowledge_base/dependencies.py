"""
Dependency container.

Builds the engine, session factory, and services once so every component
receives the same store handle explicitly instead of reaching for globals.

Dependencies: knowledge_base.configs, knowledge_base.application, knowledge_base.boundary
System role: Composition root for the knowledge-base engine
"""

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker

from knowledge_base.application.services import ChatService, DocumentService
from knowledge_base.boundary.db import get_async_engine, get_async_session_factory, init_models
from knowledge_base.boundary.storage import LocalFileStore
from knowledge_base.configs import Settings, get_settings
from knowledge_base.core.context_assembler import ContextAssembler
from knowledge_base.core.document_processing import BackgroundTaskRunner, DocumentPipeline
from knowledge_base.core.generation import GeminiTextGenerator, TextGenerator
from knowledge_base.core.retriever import Retriever
from knowledge_base.observability import configure_logging


@dataclass
class KnowledgeBase:
    """Wired knowledge-base components sharing one store handle."""

    engine: AsyncEngine
    session_factory: async_sessionmaker
    pipeline: DocumentPipeline
    documents: DocumentService
    chat: ChatService

    async def start(self) -> None:
        """Create tables and the documents directory."""
        await init_models(self.engine)
        await self.pipeline.initialize()

    async def close(self) -> None:
        """Wait for background chunking, then dispose of the engine."""
        await self.pipeline.task_runner.drain()
        await self.engine.dispose()


def build_knowledge_base(
    settings: Settings | None = None,
    generator: TextGenerator | None = None,
) -> KnowledgeBase:
    """
    Construct every component from settings.

    Args:
        settings: Application settings (cached settings if None)
        generator: Text generator (Gemini if None)

    Returns:
        KnowledgeBase: Call start() before use
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    engine = get_async_engine(settings.database)
    session_factory = get_async_session_factory(engine)

    pipeline = DocumentPipeline(
        session_factory,
        file_store=LocalFileStore(settings.ingestion.documents_dir),
        settings=settings.ingestion,
        task_runner=BackgroundTaskRunner(),
    )
    retriever = Retriever(session_factory, settings.retrieval)
    chat = ChatService(
        session_factory,
        generator or GeminiTextGenerator(settings.generation),
        retriever=retriever,
        assembler=ContextAssembler(session_factory, settings.retrieval),
        settings=settings.retrieval,
    )
    return KnowledgeBase(
        engine=engine,
        session_factory=session_factory,
        pipeline=pipeline,
        documents=DocumentService(session_factory, pipeline=pipeline, retriever=retriever),
        chat=chat,
    )

import pytest
from unittest.mock import MagicMock
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from review_assistant.api.deps import get_ai_service
from review_assistant.config import Settings, get_settings
from review_assistant.database import Base, get_db, get_session_factory
from review_assistant.main import app
from review_assistant.models import Project, SearchedLiterature
from review_assistant.services.crawler import (
    ArxivCrawler,
    PubmedCrawler,
    get_arxiv_crawler,
    get_pubmed_crawler,
)
from review_assistant.services.llm.openai_service import (
    AIClientProvider,
    AIService,
    get_ai_client_provider,
)
from review_assistant.services.seed_data import seed_reference_data

# Use an in-memory SQLite database for testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"


@pytest.fixture(scope="function")
def session_factory():
    engine = create_engine(
        SQLALCHEMY_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    # Import models to ensure they are registered with Base.metadata
    from review_assistant import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    try:
        yield TestingSessionLocal
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture(scope="function")
def db(session_factory):
    session = session_factory()
    seed_reference_data(session)
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def test_settings(tmp_path):
    return Settings(
        UPLOADS_DIR=str(tmp_path / "uploads"),
        OUTPUTS_DIR=str(tmp_path / "outputs"),
        DATA_DIR=str(tmp_path / "data"),
    )


@pytest.fixture(scope="function")
def mock_ai_service():
    service = MagicMock(spec=AIService)
    return service


@pytest.fixture(scope="function")
def mock_provider():
    provider = MagicMock(spec=AIClientProvider)
    return provider


@pytest.fixture(scope="function")
def mock_arxiv_crawler():
    return MagicMock(spec=ArxivCrawler)


@pytest.fixture(scope="function")
def mock_pubmed_crawler():
    return MagicMock(spec=PubmedCrawler)


@pytest.fixture(scope="function")
def client(db, session_factory, test_settings, mock_ai_service, mock_provider,
           mock_arxiv_crawler, mock_pubmed_crawler):
    # Override dependencies
    app.dependency_overrides = {}
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_ai_service] = lambda: mock_ai_service
    app.dependency_overrides[get_ai_client_provider] = lambda: mock_provider
    app.dependency_overrides[get_arxiv_crawler] = lambda: mock_arxiv_crawler
    app.dependency_overrides[get_pubmed_crawler] = lambda: mock_pubmed_crawler

    # 不使用 with 语句，避免 lifespan 初始化真实数据库
    yield TestClient(app)

    app.dependency_overrides = {}


@pytest.fixture
def project(db):
    project = Project(name="城市热岛效应综述", description="遥感与城市形态", status="draft")
    db.add(project)
    db.commit()
    db.refresh(project)
    return project


@pytest.fixture
def literature(db, project):
    """三篇已选文献，引用编号依次为 [1] [2] [3]"""
    rows = []
    for index, title in enumerate(["Paper A", "Paper B", "Paper C"], start=1):
        row = SearchedLiterature(
            project_id=project.id,
            source="arxiv",
            title=title,
            authors=f"Author {index}",
            abstract=f"Abstract {index}",
            doi=f"10.1000/{index}",
            url=f"http://example.com/{index}",
            metadata_json='{"published": "2023-05", "journal": "Remote Sensing"}',
            is_selected=True,
        )
        db.add(row)
        db.commit()
        rows.append(row)
    return rows


def stream_of(*chunks):
    """构造可作为 side_effect 的异步生成器函数"""
    async def _gen(*args, **kwargs):
        for chunk in chunks:
            yield chunk
    return _gen

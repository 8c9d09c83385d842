import os

import pytest

# keep test runs from writing logs/ into the project tree
os.environ.setdefault("LOG_MODE", "stdout")

from fakes import FakeCompletions, FakeOpenAI, fenced, sample_analysis  # noqa: E402
from projectinsight import create_app  # noqa: E402
from projectinsight.config import ServiceConfigs, TestingConfig  # noqa: E402
from projectinsight.services.analysis.client import AnalysisClient  # noqa: E402
from projectinsight.services.llm_chain.llm_chains import LLMChains  # noqa: E402
from projectinsight.services.projects.lifecycle import ProjectLifecycleManager  # noqa: E402
from projectinsight.services.storage.json_store import JsonDocumentStore  # noqa: E402


@pytest.fixture
def completions() -> FakeCompletions:
    return FakeCompletions(default=fenced(sample_analysis()))


@pytest.fixture
def settings() -> ServiceConfigs:
    return ServiceConfigs(llm_api_key="sk-test", openai_api_key="", llm_model="gpt-4o-mini")


@pytest.fixture
def analysis_client(settings: ServiceConfigs, completions: FakeCompletions) -> AnalysisClient:
    llm = LLMChains.from_settings(settings, client=FakeOpenAI(completions))  # type: ignore[arg-type]
    return AnalysisClient(settings, llm=llm)


@pytest.fixture
def store(tmp_path) -> JsonDocumentStore:
    return JsonDocumentStore(tmp_path / "projects")


@pytest.fixture
def manager(store: JsonDocumentStore, analysis_client: AnalysisClient) -> ProjectLifecycleManager:
    return ProjectLifecycleManager(store, analysis_client)


@pytest.fixture
async def app(tmp_path, manager: ProjectLifecycleManager):
    class Config(TestingConfig):
        PROJECTS_DIR = tmp_path / "projects"

    app = await create_app(Config)
    app.extensions["projects"] = manager
    app.extensions["analysis_client"] = manager.analysis_client
    return app


@pytest.fixture
def client(app):
    return app.test_client()

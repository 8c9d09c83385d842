import json
from types import SimpleNamespace
from typing import Any, Dict, List

from projectinsight.models.analysis import example_analysis


class FakeCompletions:
    """Stands in for ``AsyncOpenAI().chat.completions``.

    Queue replies with :meth:`reply`/:meth:`fail`; every ``create`` call is
    recorded in :attr:`calls`.  An empty queue answers with ``default``.
    """

    def __init__(self, default: str = "") -> None:
        self.default = default
        self.queue: List[Any] = []
        self.calls: List[Dict[str, Any]] = []

    def reply(self, content: str) -> "FakeCompletions":
        self.queue.append(content)
        return self

    def fail(self, exc: BaseException) -> "FakeCompletions":
        self.queue.append(exc)
        return self

    async def create(self, **kwargs: Any) -> Any:
        self.calls.append(kwargs)
        item = self.queue.pop(0) if self.queue else self.default
        if isinstance(item, BaseException):
            raise item
        message = SimpleNamespace(content=item)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FakeOpenAI:
    def __init__(self, completions: FakeCompletions) -> None:
        self.chat = SimpleNamespace(completions=completions)
        self.closed = False

    async def close(self) -> None:
        self.closed = True


def sample_analysis(
    name: str = "TaskFlow", description: str = "A task manager for remote teams"
) -> Dict[str, Any]:
    doc = example_analysis()
    doc["name"] = name
    doc["description"] = description
    doc["keyFeatures"] = ["Kanban boards", "Time tracking"]
    return doc


def fenced(payload: Any) -> str:
    """Wrap JSON the way chat models usually answer."""
    return f"Here is the analysis:\n```json\n{json.dumps(payload, ensure_ascii=False)}\n```\nGood luck!"

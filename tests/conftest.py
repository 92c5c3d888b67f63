"""Shared pytest fixtures: fake collaborators and an isolated working directory."""

import json
from pathlib import Path
from typing import Any, List, Tuple

import pytest

from pipeml import collaborator_registry
from pipeml.collaborator_registry import CollaboratorRegistry
from pipeml.collaborator_spec import CollaboratorSpec


class FakeModel:
    def __init__(self, payload: bytes) -> None:
        self.payload = payload

    def serialize(self, handle) -> None:
        handle.write(self.payload)


class Calls(list):
    """Records (name, args) tuples in call order."""

    def names(self) -> List[str]:
        return [name for name, _ in self]


class FakeTrainer:
    def __init__(self, calls: Calls, task: str, *args: Any) -> None:
        self.calls = calls
        self.task = task
        calls.append((f"{task}.init", args))

    def train(self, params, *extra: Any) -> FakeModel:
        recorded = []
        for item in extra:
            # Pre-trained taggers arrive as binary streams
            recorded.append(("stream", item.read()) if hasattr(item, "read") else item)
        self.calls.append((f"{self.task}.train", (params, *recorded)))
        return FakeModel(f"{self.task}-model".encode("utf-8"))


class FakeEvaluator:
    def __init__(self, calls: Calls, task: str, properties) -> None:
        self.calls = calls
        self.task = task
        self.properties = properties
        calls.append((f"{task}.evaluator", (properties,)))

    def _record(self, name: str):
        self.calls.append((f"{self.task}.{name}", ()))
        return {"procedure": name}

    def evaluate(self):
        return self._record("evaluate")

    def detail_evaluate(self):
        return self._record("detail_evaluate")

    def eval_error(self):
        return self._record("eval_error")

    def evaluate_accuracy(self):
        return self._record("evaluate_accuracy")


class FakeCrossValidator:
    def __init__(self, calls: Calls, task: str, params) -> None:
        self.calls = calls
        self.task = task

    def cross_validate(self, params):
        self.calls.append((f"{self.task}.cross_validate", (params,)))
        return {"folds": 10}


def make_specs(calls: Calls) -> Tuple[CollaboratorSpec, ...]:
    def trainer(task):
        return lambda *args: FakeTrainer(calls, task, *args)

    def evaluator(task):
        return lambda props: FakeEvaluator(calls, task, props)

    def cross_validator(task):
        return lambda params: FakeCrossValidator(calls, task, params)

    return (
        CollaboratorSpec("sequence", trainer=trainer("sequence"), evaluator=evaluator("sequence"),
                         cross_validator=cross_validator("sequence")),
        CollaboratorSpec("parser", trainer=trainer("parser"), evaluator=evaluator("parser")),
        CollaboratorSpec("document", trainer=trainer("document"), evaluator=evaluator("document"),
                         cross_validator=cross_validator("document")),
        CollaboratorSpec("tokenizer", evaluator=evaluator("tokenizer")),
    )


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Run every test in a temp cwd with an empty settings directory."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("PIPEML_CONFIG_DIR", str(tmp_path / ".pipeml"))
    monkeypatch.delenv("PIPEML_COLLABORATORS", raising=False)
    collaborator_registry.reset_registry()
    yield
    collaborator_registry.reset_registry()


@pytest.fixture
def calls() -> Calls:
    return Calls()


@pytest.fixture
def registry(calls) -> CollaboratorRegistry:
    reg = CollaboratorRegistry()
    for spec in make_specs(calls):
        reg.register(spec)
    return reg


@pytest.fixture
def installed_registry(registry, monkeypatch) -> CollaboratorRegistry:
    """Make ``registry`` the process-wide registry used by the CLI."""
    monkeypatch.setattr(collaborator_registry, "_DEFAULT_REGISTRY", registry)
    return registry


@pytest.fixture
def write_params(tmp_path):
    def _write(name: str, content: str = "Language=en\nTrainSet=train.conll\n") -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def write_settings(tmp_path):
    """Write a settings file into the isolated PIPEML_CONFIG_DIR."""
    def _write(settings: dict) -> Path:
        path = tmp_path / ".pipeml" / "config.json"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(settings), encoding="utf-8")
        return path

    return _write

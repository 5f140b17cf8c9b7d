from __future__ import annotations

import io
import os
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from pathlib import Path

import pytest
from rich.console import Console

from hsh.core.aliases import AliasTable
from hsh.core.dispatch import Dispatcher
from hsh.core.session import SessionState


@dataclass
class FakeRunner:
    statuses: dict[str, int] = field(default_factory=dict)
    calls: list[list[str]] = field(default_factory=list)

    def __call__(self, argv: list[str]) -> int:
        self.calls.append(argv)
        return self.statuses.get(argv[-1], 0)

    @property
    def lines(self) -> list[str]:
        return [argv[-1] for argv in self.calls]


@dataclass
class ScriptedConfirm:
    answers: list[bool | BaseException] = field(default_factory=list)
    questions: list[str] = field(default_factory=list)

    def __call__(self, question: str) -> bool:
        self.questions.append(question)
        answer = self.answers.pop(0) if self.answers else False
        if isinstance(answer, BaseException):
            raise answer
        return answer


@pytest.fixture
def console() -> Console:
    return Console(file=io.StringIO(), width=200, color_system=None)


@pytest.fixture
def console_output(console: Console) -> Callable[[], str]:
    def _read() -> str:
        output = console.file
        assert isinstance(output, io.StringIO)
        return output.getvalue()

    return _read


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def confirm() -> ScriptedConfirm:
    return ScriptedConfirm()


@pytest.fixture
def session() -> SessionState:
    return SessionState()


@pytest.fixture
def make_dispatcher(console: Console, session: SessionState, runner: FakeRunner, confirm: ScriptedConfirm):
    def _make(aliases: dict[str, str] | None = None, *, privileged: bool = False) -> Dispatcher:
        return Dispatcher(
            AliasTable(aliases),
            session,
            console,
            confirm=confirm,
            runner=runner,
            is_privileged=lambda: privileged,
        )

    return _make


@pytest.fixture(autouse=True)
def _restore_cwd() -> Iterator[None]:
    cwd = Path.cwd()
    yield
    os.chdir(cwd)

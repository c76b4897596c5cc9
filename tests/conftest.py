"""Shared fixtures: fake command runner and module builders."""

from datetime import datetime, timezone

import pytest

from faro.common.process import CommandResult
from faro.models import Module, UpdateInfo


class FakeRunner:
    """Stands in for ``run_command``; answers by longest matching command prefix."""

    def __init__(self, responses=None, default=None):
        self.responses = dict(responses or {})
        self.default = default or CommandResult(0)
        self.calls = []

    def __call__(self, args, cwd):
        self.calls.append((list(args), cwd))
        line = " ".join(args)
        matches = [p for p in self.responses if line.startswith(p)]
        if matches:
            return self.responses[max(matches, key=len)]
        return self.default

    @property
    def commands(self):
        return [" ".join(args) for args, _ in self.calls]


@pytest.fixture
def fake_runner():
    """Factory for FakeRunner instances."""
    return FakeRunner


@pytest.fixture
def make_module():
    """Build a Module with an optional candidate version."""

    def _make(name, version="1.0.0", update="1.1.0", direct=True, dependency_type="", update_time=None):
        info = UpdateInfo(update, update_time) if update is not None else None
        return Module(
            name=name,
            version=version,
            update=info,
            direct=direct,
            dependency_type=dependency_type,
        )

    return _make


@pytest.fixture
def fixed_now():
    return datetime(2026, 1, 17, tzinfo=timezone.utc)

"""Shared pytest fixtures and test helpers for htcdl tests."""

from __future__ import annotations

import logging
import os
from collections.abc import Generator
from pathlib import Path

import pytest
from click.testing import CliRunner

from htcdl.config.settings import HtcSettings
from htcdl.domain.builders import ModelBuilder, command, state, transition_on_command
from htcdl.domain.model import Model, StateMachine
from htcdl.infrastructure.codec import load_model
from htcdl.services.telemetry import disable_telemetry

FIXTURES = Path(__file__).parent / "fixtures"
CAR_MODEL_PATH = FIXTURES / "car-model.htcdl.json"


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[None]:
    """Keep stray htcdl.toml files and HTCDL_* env vars out of every test.

    CLI runs reconfigure logging and, with ``--verbose``, enable telemetry for
    the rest of the thread; both are restored afterwards.
    """
    root = logging.getLogger()
    handlers = root.handlers[:]
    monkeypatch.chdir(tmp_path)
    for name in [n for n in os.environ if n.startswith("HTCDL_")]:
        monkeypatch.delenv(name)
    yield
    root.handlers = handlers
    disable_telemetry()


@pytest.fixture
def settings(tmp_path: Path) -> HtcSettings:
    """Default settings with no config file."""
    return HtcSettings.from_cli(start=tmp_path)


@pytest.fixture
def car_model() -> Model:
    return load_model(CAR_MODEL_PATH)


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def minimal_model(model_id: str = "dtmi:test:minimal;1") -> Model:
    """A valid model with nothing but the required root fields."""
    return ModelBuilder(model_id, "Minimal Test", "A minimal test model").build()


def chain_model(*transitions: tuple[str, str, str], states: tuple[str, ...] = ("A", "B", "C")) -> Model:
    """A model whose state machine starts at the first state.

    Each transition is ``(from, to, command)``; every command is declared.
    """
    builder = ModelBuilder("dtmi:test:chain;1", "Test", "Test")
    for cmd in dict.fromkeys(t[2] for t in transitions):
        builder.add_command(command(cmd))
    return builder.with_state_machine(
        StateMachine(
            initial_state=states[0],
            states=tuple(state(s) for s in states),
            transitions=tuple(transition_on_command(*t) for t in transitions),
        )
    ).build()


def write_model_file(directory: Path, text: str, name: str = "model.htcdl.json") -> Path:
    path = directory / name
    path.write_text(text, encoding="utf-8")
    return path

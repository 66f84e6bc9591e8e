# tests/conftest.py
from __future__ import annotations

import pytest

from fakes import FakeLLM


@pytest.fixture()
def fake_llm() -> FakeLLM:
    return FakeLLM()

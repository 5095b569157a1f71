# tests/conftest.py
from __future__ import annotations

import pytest

from jokebox.schemas import SingleJoke, TwoPartJoke


@pytest.fixture(autouse=True)
def _isolate_data_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("JOKEBOX_DATA_DIR", str(tmp_path / "data"))


@pytest.fixture
def single_joke() -> SingleJoke:
    return SingleJoke(
        id=1,
        joke="Why do programmers prefer dark mode? Because light attracts bugs.",
        category="Programming",
    )


@pytest.fixture
def twopart_joke() -> TwoPartJoke:
    return TwoPartJoke(
        id=2,
        setup="Why did the chicken cross the road?",
        delivery="To get to the other side.",
        category="Misc",
    )

from __future__ import annotations

from typing import Iterator

import pytest

from ambients_ref.utils import PARSE_TRACE_ENV


@pytest.fixture(autouse=True)
def quiet_parse_trace(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Start every test with per-production tracing off.

    The shell running the suite may export the trace variable; tests that
    need it set it themselves.
    """
    monkeypatch.delenv(PARSE_TRACE_ENV, raising=False)
    yield

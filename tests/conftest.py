from __future__ import annotations

from io import BytesIO

import pytest

from helpers import RecordingRenderer
from mdcat.output import Output


@pytest.fixture
def renderer() -> RecordingRenderer:
    return RecordingRenderer()


@pytest.fixture
def stream() -> BytesIO:
    return BytesIO()


@pytest.fixture
def output(stream: BytesIO) -> Output:
    return Output(stream)

from __future__ import annotations

import pytest

from delegate_kit.output import RecordingSink


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Callable

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from doc_reflow.config import PipelineSpec  # noqa: E402

_STEP_ENV_PREFIXES = ("REFLOW__", "EXTRACT_FOOTNOTES__", "ALIGN_TEXT__")


@pytest.fixture(autouse=True)
def _isolate_step_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep ``STEP__option`` variables from the host shell out of the tests."""
    tuple(
        monkeypatch.delenv(key)
        for key in list(os.environ)
        if key.upper().startswith(_STEP_ENV_PREFIXES)
    )


@pytest.fixture
def spec() -> Callable[..., PipelineSpec]:
    return lambda *steps, **options: PipelineSpec(
        pipeline=list(steps) or PipelineSpec().pipeline, options=options
    )

from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path

import pytest

SRC = Path(__file__).resolve().parents[1] / "src"


@pytest.mark.parametrize(
    "module",
    [
        "paper_engine.runtime.paper",
        "paper_engine.adapters.textual.app",
        "paper_engine.actions",
        "paper_engine.keymaps",
        "paper_engine.modes.mode_manager",
    ],
)
def test_module_imports_in_fresh_interpreter(module: str) -> None:
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(
        part for part in (str(SRC), env.get("PYTHONPATH", "")) if part
    )

    completed = subprocess.run(
        [sys.executable, "-c", f"import {module}"],
        capture_output=True,
        text=True,
        env=env,
        check=False,
    )

    assert completed.returncode == 0, completed.stderr

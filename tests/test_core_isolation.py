import os
import subprocess
import sys

import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))


@pytest.mark.parametrize("module", [
    "config.countries",
    "core.impact",
    "core.portfolio",
    "core.projection",
    "core.state",
])
def test_engine_imports_without_streamlit(module):
    """The engine must stay importable when streamlit is unavailable."""
    result = subprocess.run(
        [sys.executable, "-c",
         f"import sys; sys.modules['streamlit']=None; import {module}"],
        capture_output=True,
        cwd=ROOT,
    )
    assert result.returncode == 0, f"{module} import failed: {result.stderr.decode()}"

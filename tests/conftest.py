"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages.
"""

import logging
import sys
from pathlib import Path

import pytest
import structlog

# Insert local src directory at the beginning of sys.path
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of treegrep modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("treegrep"):
        del sys.modules[module_name]


@pytest.fixture(autouse=True)
def _reset_structlog():
    """Keep logging configuration from leaking between tests."""
    yield
    structlog.reset_defaults()
    logging.getLogger().handlers.clear()


@pytest.fixture
def sample_tree(tmp_path: Path) -> Path:
    """The two-file tree used by the search scenarios.

    a.txt = "foo\\nbar\\nfoo", b.txt = "baz"
    """
    (tmp_path / "a.txt").write_text("foo\nbar\nfoo")
    (tmp_path / "b.txt").write_text("baz")
    return tmp_path

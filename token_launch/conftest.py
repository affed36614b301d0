import copy
import sys
from pathlib import Path

import pytest

import token_launch.core.config as launch_config

# Add repo root to path so scripts/ can be imported
_repo_root = Path(__file__).parent.parent
_repo_root_str = str(_repo_root)


def pytest_configure(config):
    if _repo_root_str not in sys.path:
        sys.path.insert(0, _repo_root_str)
    elif sys.path.index(_repo_root_str) > 0:
        sys.path.remove(_repo_root_str)
        sys.path.insert(0, _repo_root_str)


@pytest.fixture
def restore_global_config():
    original = copy.deepcopy(launch_config.CONFIG)
    yield
    launch_config.set_config(original)

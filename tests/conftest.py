"""
Shared fixtures for the layout tests.
"""

import sys
from pathlib import Path

import pytest

# Add the repository root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from ocr_layout.config import PipelineConfig
from ocr_layout.utils.writer import DocumentWriter


@pytest.fixture
def config():
    return PipelineConfig()


@pytest.fixture
def writer():
    return DocumentWriter()

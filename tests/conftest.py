"""Pytest configuration for repository test runs."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

VOCABULARY_YAML = """\
vocabularies:
  - name: LifeStage
    term: dwc:lifeStage
    concepts:
      - name: Organism
      - name: Juvenile
        parent: Organism
      - name: Larva
        parent: Juvenile
        labels: [larvae, larval]
      - name: Adult
        parent: Organism
        labels: [adults, imago]
  - name: EventType
    term: eventType
    concepts:
      - name: Survey
        labels: [transect survey]
"""

METADATA_YAML = """\
datasets:
  DS1:
    title: Peruvian Plant Survey
    publisher: Museo de Historia Natural
    license: CC-BY 4.0
    unique_key:
      terms: [catalogNumber, dwc:country]
      strip_spaces: false
    default_values:
      country: Peru
  DS2:
    title: Untitled
"""


def pytest_sessionstart() -> None:
    """Add src directory to sys.path for test imports."""
    project_root = Path(__file__).resolve().parent.parent
    src_path = project_root / "src"
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))


@pytest.fixture
def vocabulary_path(tmp_path: Path) -> Path:
    """Write a small life stage and event type vocabulary file."""
    path = tmp_path / "vocabulary.yaml"
    path.write_text(VOCABULARY_YAML, encoding="utf-8")
    return path


@pytest.fixture
def metadata_path(tmp_path: Path) -> Path:
    """Write a metadata store with one fully configured dataset."""
    path = tmp_path / "metadata.yaml"
    path.write_text(METADATA_YAML, encoding="utf-8")
    return path

from datetime import date
from pathlib import Path

import pytest

from editor.store import InMemoryTemplateStore
from models.invoice import InvoiceData
from models.presets import load_presets
from models.template_config import TemplateConfig
from settings import Settings
from utils.mock_invoice import generate_mock_invoice

TENANT_ID = "tenant-1"


@pytest.fixture
def config() -> TemplateConfig:
    """Default template config; every field at its schema default."""
    return TemplateConfig()


@pytest.fixture
def invoice() -> InvoiceData:
    """Fully populated sample invoice with a fixed date so output is stable."""
    return generate_mock_invoice(today=date(2025, 1, 15))


@pytest.fixture
def presets() -> dict[str, TemplateConfig]:
    return load_presets()


@pytest.fixture
def store(presets) -> InMemoryTemplateStore:
    """In-memory store for TENANT_ID seeded with the bundled presets."""
    return InMemoryTemplateStore(TENANT_ID, presets=presets)


@pytest.fixture
def tmp_settings(tmp_path: Path) -> Settings:
    """Settings pointing at a fresh temp directory for tests that write output.

    Directory layout mirrors a real project:
        data/presets/   extra preset YAML files
        data/invoices/  invoice JSON records
        data/output/    rendered HTML
    """
    for subdir in ("presets", "invoices"):
        (tmp_path / subdir).mkdir()
    return Settings(project_dir=tmp_path)

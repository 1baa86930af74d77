"""Preset seed templates shipped as YAML files in ``presets/``."""
import logging
from pathlib import Path

from models.template_config import TemplateConfig

logger = logging.getLogger(__name__)

PRESETS_DIR = Path(__file__).resolve().parent.parent / "presets"


def load_presets(directory: Path = PRESETS_DIR) -> dict[str, TemplateConfig]:
    """Load every ``*.yaml`` preset in ``directory``, keyed by file stem.

    Raises FileNotFoundError if the directory does not exist.
    """
    if not directory.is_dir():
        raise FileNotFoundError(f"Preset directory not found: {directory}")
    presets = {
        path.stem: TemplateConfig.load(path)
        for path in sorted(directory.glob("*.yaml"))
    }
    logger.debug("Loaded %d preset(s) from %s", len(presets), directory)
    return presets

#!/usr/bin/env python3
"""Render an invoice with a template to a standalone HTML page.

Usage:
    python render_invoice.py --list-presets
    python render_invoice.py --template modern_corporate
    python render_invoice.py --template my_template.yaml --invoice data/invoices/0042.json
    python render_invoice.py --template tech_startup --set colors.primary='#FF0000' --set layout.sectionGap=48
"""
import argparse
import asyncio
import logging
import sys
from pathlib import Path

import yaml

sys.path.insert(0, str(Path(__file__).resolve().parent))

from settings import Settings
from editor.lifecycle import TemplateEditor
from editor.store import InMemoryTemplateStore
from models.invoice import InvoiceData
from models.presets import load_presets
from models.template_config import TemplateConfig
from pipeline.compose import render_page
from utils.exceptions import TemplateEngineError
from utils.mock_invoice import generate_mock_invoice

logger = logging.getLogger("render_invoice")


def _parse_assignment(text: str) -> tuple[str, object]:
    """``path=value`` with the value read as YAML (``48`` -> int, ``true`` -> bool)."""
    path, sep, raw = text.partition("=")
    if not sep or not path.strip():
        raise argparse.ArgumentTypeError(f"expected path=value, got '{text}'")
    if not raw.strip():
        return path.strip(), ""
    try:
        return path.strip(), yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise argparse.ArgumentTypeError(f"cannot read value of '{text}': {exc}") from exc


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Render an invoice template to HTML")
    parser.add_argument("--template", default="classic_professional",
                        help="Preset key or path to a template YAML file")
    parser.add_argument("--invoice", type=Path, default=None,
                        help="Invoice JSON file; a sample invoice is used when omitted")
    parser.add_argument("--set", dest="assignments", action="append", default=[], type=_parse_assignment,
                        metavar="PATH=VALUE", help="Override a config field, e.g. table.borderStyle=none")
    parser.add_argument("--scale", type=float, default=None,
                        help="Preview scale factor (defaults to ITE_PREVIEW_SCALE)")
    parser.add_argument("--output", type=Path, default=None,
                        help="Output HTML path (defaults to <output_dir>/<invoice number>.html)")
    parser.add_argument("--list-presets", action="store_true", dest="list_presets",
                        help="List the available presets and exit")
    return parser


async def _render(args: argparse.Namespace, settings: Settings, store: InMemoryTemplateStore) -> Path:
    presets = {t.id: t for t in await store.fetch_presets()}
    if args.template in presets:
        template_id = args.template
    else:
        config = TemplateConfig.load(Path(args.template))
        template_id = (await store.create(config.name, config)).id

    invoice = InvoiceData.load(args.invoice) if args.invoice else generate_mock_invoice()
    editor = TemplateEditor(
        store,
        template_id,
        preview_invoice=invoice,
        preview_scale=settings.preview_scale if args.scale is None else args.scale,
        custom_suffix=settings.custom_suffix,
    )
    await editor.load()
    for path, value in args.assignments:
        editor.change(path, value)

    output = args.output or settings.output_dir / f"{invoice.invoice_number}.html"
    output.parent.mkdir(parents=True, exist_ok=True)
    html = render_page(invoice, editor.live_config, scale=editor.preview_scale)
    output.write_text(html, encoding="utf-8")
    await store.track_usage(template_id)
    return output


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    settings = Settings()

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
        datefmt="%H:%M:%S",
    )

    presets = load_presets()
    if settings.presets_dir.is_dir():
        presets.update(load_presets(settings.presets_dir))
    store = InMemoryTemplateStore(settings.tenant_id, presets=presets)

    if args.list_presets:
        for key, config in presets.items():
            print(f"{key:24s} {config.name}")
        return 0

    try:
        output = asyncio.run(_render(args, settings, store))
    except (TemplateEngineError, FileNotFoundError, ValueError) as exc:
        logger.error("%s", exc)
        return 1

    logger.info("=== Done → %s ===", output)
    return 0


if __name__ == "__main__":
    sys.exit(main())

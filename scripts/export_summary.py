from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from pydantic import ValidationError

from apps.worker.lib.layout import split_across_pages
from apps.worker.steps.export_render import render_exports
from packages.shared.models import DischargeData

logger = logging.getLogger("export_summary")


def _load(path: Path) -> DischargeData:
    raw = json.loads(path.read_text(encoding="utf-8"))
    return DischargeData.model_validate(raw)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Export a discharge summary from a JSON draft.")
    parser.add_argument("input", type=Path, help="Path to a DischargeData JSON file")
    parser.add_argument("--out-dir", type=Path, default=Path("."), help="Directory to write artifacts into")
    parser.add_argument("--preview", action="store_true", help="Also write the PDF preview")
    parser.add_argument("--layout-only", action="store_true", help="Print the page split as JSON and exit")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    try:
        data = _load(args.input)
    except (OSError, json.JSONDecodeError, ValidationError) as exc:
        logger.error("Could not read %s: %s", args.input, exc)
        return 2

    if args.layout_only:
        print(json.dumps(split_across_pages(data).summary(), indent=2))
        return 0

    exports = render_exports(data, include_preview=args.preview, save=False)
    args.out_dir.mkdir(parents=True, exist_ok=True)
    for artifact in exports.artifacts.values():
        target = args.out_dir / artifact.filename
        target.write_bytes(artifact.content)
        print(f"wrote {target} ({len(artifact.content)} bytes)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

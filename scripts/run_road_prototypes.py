from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from roadpipe._io import ensure_dir, new_run_id, write_geojson
from roadpipe._report import result_counts, write_run_card
from roadpipe.config import get_params_hash, load_road_config
from roadpipe.model import load_plan
from roadpipe.prototypes import calculate_plan_result
from roadpipe.render import prototypes_to_features, render_preview, strips_to_features

LOG = logging.getLogger("run_road_prototypes")


def setup_logging(log_path: Path) -> None:
    log_path.parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s | %(levelname)s | %(message)s",
        handlers=[
            logging.FileHandler(log_path, encoding="utf-8"),
            logging.StreamHandler(),
        ],
    )


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Build road prototypes from a gesture plan.")
    ap.add_argument("--plan", required=True)
    ap.add_argument("--config", default="configs/roads.yaml")
    ap.add_argument("--out-dir", default="runs")
    ap.add_argument("--run-id", default="")
    args = ap.parse_args(argv)

    run_id = args.run_id or new_run_id()
    run_dir = ensure_dir(Path(args.out_dir) / run_id)
    setup_logging(run_dir / "run.log")
    LOG.info("run_id=%s", run_id)

    plan_path = Path(args.plan)
    if not plan_path.exists():
        LOG.error("plan not found: %s", plan_path)
        return 2

    cfg = load_road_config(Path(args.config))
    plan = load_plan(plan_path)
    result = calculate_plan_result(plan, cfg)

    write_geojson(run_dir / "prototypes.geojson", prototypes_to_features(result.prototypes, cfg))
    write_geojson(run_dir / "render.geojson", strips_to_features(render_preview(result.prototypes, cfg)))
    write_run_card(run_dir / "RunCard.md", run_id, get_params_hash(cfg), cfg.to_dict(), result)

    LOG.info("DONE -> %s %s", run_dir, result_counts(result))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

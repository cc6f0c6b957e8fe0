from __future__ import annotations
from pathlib import Path
from typing import Any, Dict

import yaml

from roadpipe._io import write_text
from roadpipe.model import PlanResult


def md_kv(title: str, kv: Dict[str, Any]) -> str:
    """Markdown card: scalars as bullets, mappings as yaml blocks."""
    scalars = [f"- {k}: {v}" for k, v in kv.items() if not isinstance(v, dict)]
    blocks = [
        f"## {k}\n```yaml\n{yaml.safe_dump(v, sort_keys=False).rstrip()}\n```"
        for k, v in kv.items()
        if isinstance(v, dict)
    ]
    return "\n".join([f"# {title}", ""] + scalars + [""] + blocks + [""])


def result_counts(result: PlanResult) -> Dict[str, int]:
    intersections = result.intersections()
    return {
        "lanes": len(result.lanes()),
        "intersections": len(intersections),
        "incoming_connectors": sum(len(i.incoming) for i in intersections),
        "outgoing_connectors": sum(len(i.outgoing) for i in intersections),
    }


def write_run_card(path: Path, run_id: str, params_hash: str, params: Dict[str, Any], result: PlanResult) -> None:
    kv = {
        "run_id": run_id,
        "params_hash": params_hash,
        "Counts": result_counts(result),
        "Params": params,
    }
    write_text(path, md_kv("RunCard", kv))

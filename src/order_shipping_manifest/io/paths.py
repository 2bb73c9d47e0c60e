from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional, Tuple

from order_shipping_manifest.config.logging_config import default_log_path_for_input


def derive_output_paths(input_file: Path, filename: str, out_dir: Optional[Path] = None) -> Tuple[Path, Path]:
    """
    Given an input records file and the export's fixed filename, return
    (export_path, log_path). The export lands in `out_dir` (default: next to
    the input); the log always sits next to the input.

    Raises FileNotFoundError if input_file doesn't exist (explicit early signal for CLI).
    """
    p = Path(input_file)
    if not p.exists():
        raise FileNotFoundError(p)

    target_dir = Path(out_dir) if out_dir is not None else p.parent
    return target_dir / filename, default_log_path_for_input(p)


def read_records(input_file: Path) -> Any:
    """Load the JSON records file (a node list or a GraphQL response body)."""
    with Path(input_file).open("r", encoding="utf-8-sig") as fh:
        return json.load(fh)

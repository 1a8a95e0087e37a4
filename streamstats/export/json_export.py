"""JSON export of dashboard series for the static web front end.

The renderer binds these fields directly to visual channels. Undefined
statistics (NaN) are written as null so the front end can show
"insufficient data" instead of plotting a made-up value.
"""

import json
import logging
import math
from datetime import date
from pathlib import Path
from typing import Any, Dict, Union

import numpy as np

logger = logging.getLogger(__name__)


def to_json_safe(obj: Any) -> Any:
    """Recursively convert numpy types, dates and NaN/inf into JSON values."""
    if isinstance(obj, dict):
        return {str(k): to_json_safe(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple, np.ndarray)):
        return [to_json_safe(v) for v in obj]
    if isinstance(obj, (np.bool_, bool)):
        return bool(obj)
    if isinstance(obj, (np.integer, int)):
        return int(obj)
    if isinstance(obj, (np.floating, float)):
        value = float(obj)
        return None if math.isnan(value) or math.isinf(value) else value
    if isinstance(obj, date):
        return obj.isoformat()
    return obj


def save_dashboard_data(data: Dict[str, Any], output_path: Union[str, Path]) -> Path:
    """Write the dashboard payload as JSON.

    Args:
        data: Output of ``build_dashboard_data``
        output_path: Destination file (parent directories are created)

    Returns:
        Path written
    """
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        json.dump(to_json_safe(data), f, indent=2, ensure_ascii=False, allow_nan=False)

    logger.info(f"✓ Saved dashboard data to {path}")
    return path


def load_dashboard_data(input_path: Union[str, Path]) -> Dict[str, Any]:
    with open(input_path, "r", encoding="utf-8") as f:
        return json.load(f)

"""Bridge from Python to the Node.js Matter worker.

Spawns the worker process, sends the hydrated world JSON on stdin and collects
the simulated frames.
"""
from __future__ import annotations

import json
import subprocess
from pathlib import Path
from typing import Any, Dict, Optional

from rigidscene.logging_utils import get_logger
from rigidscene.models.settings import settings


_REPO_ROOT = Path(__file__).resolve().parents[4]
_BACKEND_DIR = _REPO_ROOT / "backend"

logger = get_logger(__name__)


def _default_worker_path() -> Path:
  return _BACKEND_DIR / "sim_worker" / "matter_worker.js"


def _resolve_worker_path(raw_path: str | None) -> Path:
  if not raw_path:
    return _default_worker_path()

  path = Path(raw_path).expanduser()
  if path.is_absolute():
    return path
  return (_REPO_ROOT / path).resolve()


def simulate_world(
  payload: Dict[str, Any],
  duration_s: Optional[float] = None,
  frame_rate: Optional[int] = None,
) -> Dict[str, Any]:
  """Step a hydrated world (see `MatterWorld.to_payload`) with Matter.js.

  Returns a dict with keys `frames` and `meta`. Raises RuntimeError on failure.
  """
  worker_path = _resolve_worker_path(settings.MATTER_WORKER_PATH)
  if not worker_path.exists():
    raise RuntimeError(f"Matter worker not found at: {worker_path}")

  request = {
    **payload,
    "duration_s": float(duration_s if duration_s is not None else settings.SIM_DEFAULT_DURATION_S),
    "frame_rate": int(frame_rate if frame_rate is not None else settings.SIM_FRAME_RATE),
  }

  cmd = ["node", str(worker_path)]
  try:
    proc = subprocess.run(
      cmd,
      input=json.dumps(request).encode("utf-8"),
      stdout=subprocess.PIPE,
      stderr=subprocess.PIPE,
      timeout=float(settings.MATTER_WORKER_TIMEOUT_S),
      check=False,
    )
  except FileNotFoundError as e:
    raise RuntimeError("Node.js runtime not found. Please install Node and ensure 'node' is on PATH.") from e
  except subprocess.TimeoutExpired as e:
    raise RuntimeError(f"Matter worker timed out after {settings.MATTER_WORKER_TIMEOUT_S}s") from e

  out = proc.stdout.decode("utf-8", errors="replace").strip()
  err = proc.stderr.decode("utf-8", errors="replace").strip()
  if err:
    # the worker logs with console.error
    logger.warning("[matter-worker] %s", err)

  if not out:
    raise RuntimeError("Matter worker produced no output")
  try:
    data = json.loads(out)
  except json.JSONDecodeError as e:
    raise RuntimeError(f"Invalid JSON from Matter worker: {out[:200]}...") from e

  if "error" in data:
    raise RuntimeError(f"Matter worker error: {data['error']}")
  return data


__all__ = ["simulate_world"]

"""JSON file helpers."""

import json
import os
import tempfile
from typing import Any

from utils import common

logger = common.get_logger('json_utils')


def save_json_to_file(file_path: str, data: dict[str, Any]) -> None:
  """Save dict to json file atomically.

  The data is written to a temp file in the target directory first and then
  moved over the destination, so a crash never leaves a half-written file.

  Args:
    file_path: The file path to save.
    data: The dict data to save.

  Raises:
    OSError: If the file cannot be written.
  """
  expanded_path = os.path.expanduser(file_path)
  target_dir = os.path.dirname(expanded_path) or '.'
  os.makedirs(target_dir, exist_ok=True)

  fd, tmp_path = tempfile.mkstemp(dir=target_dir, prefix='.matlogx_', suffix='.tmp')
  try:
    with os.fdopen(fd, 'w', encoding='utf-8') as f:
      json.dump(data, f, indent=4, ensure_ascii=False)
    os.replace(tmp_path, expanded_path)
  except (OSError, TypeError) as e:
    logger.error('Error saving json file %s: %s', expanded_path, e)
    try:
      os.unlink(tmp_path)
    except OSError:
      pass
    raise


def load_json_from_file(file_path: str) -> dict[str, Any]:
  """Load json file to dict.

  Args:
    file_path: The file path to load.

  Returns:
    The dict data from json file.

  Raises:
    OSError: If the file cannot be read.
    ValueError: If the file is not a JSON object.
  """
  expanded_path = os.path.expanduser(file_path)
  with open(expanded_path, 'r', encoding='utf-8') as f:
    data = json.load(f)
  if not isinstance(data, dict):
    raise ValueError(f'Expected a JSON object in {expanded_path}')
  return data

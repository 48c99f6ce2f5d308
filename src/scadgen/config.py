"""Load serializer formatting options from YAML files.

YAML format:
```yaml
precision: 4
indent: "    "
fn: 64
```
All keys are optional; unknown keys are rejected.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from .errors import ValidationError
from .serializer import FormatOptions

logger = logging.getLogger(__name__)


def load_format_options(path: str | Path) -> FormatOptions:
    """Read FormatOptions from a YAML file.

    An empty file gives the default options.

    Raises:
        FileNotFoundError: If the file does not exist
        ValidationError: If the YAML is not a mapping or holds unknown keys
            or bad values
    """
    path = Path(path)
    logger.info("Loading format options from %s", path)
    with open(path, encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise ValidationError(f"invalid YAML in {path}: {exc}", shape="format_options") from exc
    if data is None:
        return FormatOptions()
    return FormatOptions.from_dict(data)

"""
Environment assembly for the wxpay client.

Settings may come from the process environment, a ``.env`` file and explicit
overrides. Only ``WXPAY_*`` keys are handed to
:class:`wxpay_client.core.config.PayConfig`, so unrelated variables never
leak into the configuration.
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, MutableMapping, Optional, Tuple

logger = logging.getLogger(__name__)

ENV_PREFIX = "WXPAY_"

_KEY = re.compile(r"[A-Za-z_][A-Za-z0-9_]*\Z")


def _parse_line(line: str) -> Optional[Tuple[str, str]]:
    """Split one ``.env`` line into a key and value, or ``None`` to skip it."""
    line = line.strip()
    if not line or line.startswith("#"):
        return None
    if line.startswith("export "):
        line = line[len("export "):].lstrip()
    if "=" not in line:
        return None

    key, value = (part.strip() for part in line.split("=", 1))
    if not _KEY.match(key):
        return None

    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return key, value[1:-1]
    # Unquoted values may carry a trailing comment.
    return key, value.split(" #", 1)[0].rstrip()


def _read_env_file(path: Path) -> Dict[str, str]:
    try:
        data = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.debug("No env file at %s", path)
        return {}

    values: Dict[str, str] = {}
    for number, raw_line in enumerate(data.splitlines(), start=1):
        parsed = _parse_line(raw_line)
        if parsed is None:
            if raw_line.strip() and not raw_line.strip().startswith("#"):
                logger.warning("Ignoring malformed line %d in %s", number, path)
            continue
        key, value = parsed
        values[key] = value
    return values


def load_env_file(
    path: str = ".env",
    *,
    environ: Optional[MutableMapping[str, str]] = None,
) -> Dict[str, str]:
    """
    Copy settings from ``path`` into ``environ`` without replacing existing keys.
    """
    target: MutableMapping[str, str] = environ if environ is not None else os.environ
    for key, value in _read_env_file(Path(path)).items():
        target.setdefault(key, value)
    return dict(target)


@dataclass(frozen=True)
class PayEnvironment:
    """Resolved settings used to build a :class:`PayConfig`."""

    variables: Mapping[str, str]

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self.variables.get(key, default)

    def pay_settings(self) -> Dict[str, str]:
        return {
            key: value
            for key, value in self.variables.items()
            if key.startswith(ENV_PREFIX)
        }


def build_environment(
    *,
    env_file: Optional[str] = ".env",
    base: Optional[Mapping[str, str]] = None,
    overrides: Optional[Mapping[str, str]] = None,
) -> PayEnvironment:
    """
    Layer ``overrides`` over ``base`` over ``env_file``.

    ``base`` defaults to :data:`os.environ`; an explicit empty mapping means no
    process settings. Pass ``env_file=None`` to skip the file.
    """
    merged: Dict[str, str] = {}
    if env_file is not None:
        merged.update(_read_env_file(Path(env_file)))
    merged.update(os.environ if base is None else base)
    if overrides:
        merged.update(overrides)
    return PayEnvironment(variables=merged)

"""Resolve the configured decoding-engine factory from a dotted path."""
from __future__ import annotations

import importlib
import logging

from audioscribe.ports.engine import EngineFactory

logger = logging.getLogger(__name__)


def load_engine_factory(path: str) -> EngineFactory:
    """Import ``package.module:attribute`` and return the callable.

    Raises ValueError for a malformed path or a non-callable target, and
    ImportError when the module is missing.
    """
    module_name, sep, attr_path = path.partition(":")
    if not sep or not module_name or not attr_path:
        raise ValueError(
            f"Engine factory must look like 'package.module:callable', got {path!r}"
        )

    module = importlib.import_module(module_name)
    target: object = module
    for attr in attr_path.split("."):
        try:
            target = getattr(target, attr)
        except AttributeError:
            raise ValueError(f"{module_name} has no attribute {attr_path!r}") from None

    if not callable(target):
        raise ValueError(f"Engine factory {path!r} is not callable")
    logger.info("Using decoding engine factory %s", path)
    return target

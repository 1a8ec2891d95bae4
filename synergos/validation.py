"""Lenient model validation — drop what fails, keep the rest.

Callers hand the engine plain dicts. A field that fails validation is
dropped so its default applies; only a model whose required fields are
missing or unusable cannot be built at all.
"""

from __future__ import annotations

import logging
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

_logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def _field_keys(cls: type[BaseModel], key: Any) -> set[str]:
    """Both spellings (name and alias) of the field an error points at."""
    keys = {str(key)}
    for name, info in cls.model_fields.items():
        if key in (name, info.alias):
            keys.add(name)
            if info.alias:
                keys.add(info.alias)
    return keys


def validate_leniently(cls: type[M], raw: dict[str, Any]) -> M | None:
    """Build ``cls`` from ``raw``, dropping top-level fields that fail.

    Returns None when a required field is missing or had to be dropped.
    """
    data = dict(raw)
    # Each pass drops at least one bad field, so this terminates.
    for _ in range(len(data) + 1):
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            bad: set[str] = set()
            for error in exc.errors():
                if error["loc"]:
                    bad |= _field_keys(cls, error["loc"][0])
            bad &= set(data)
            if not bad:
                break
            _logger.debug("Dropping malformed %s fields: %s", cls.__name__, sorted(bad))
            for key in bad:
                data.pop(key)
    return None

"""Export configuration for scenedoc.

The provenance string written into every document is an explicit value
passed to the codecs, never module-level state.  ``ExportConfig`` is
immutable; build a new one to change it.
"""
from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field

from scenedoc.document.types import EXPORT_SOURCE

SOURCE_ENV_VAR: str = "SCENEDOC_EXPORT_SOURCE"


@dataclass(frozen=True)
class ExportConfig:
    """Settings threaded into document serialization.

    Parameters
    ----------
    source:
        Producer identity stored in the ``source`` field of every
        exported document.  Advisory only; readers never check it.
    indent:
        Indentation used by the JSON encoder.  Documents are meant to
        be diff-friendly, so this should stay positive.
    """

    source: str = EXPORT_SOURCE
    indent: int = field(default=2)

    def __post_init__(self) -> None:
        if not isinstance(self.source, str):
            raise TypeError("source must be a string")
        if self.indent < 0:
            raise ValueError(f"indent must be >= 0, got {self.indent}")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ExportConfig":
        """Build a config from environment variables.

        ``SCENEDOC_EXPORT_SOURCE`` overrides the default source when set
        to a non-empty value.
        """
        env = os.environ if environ is None else environ
        source = env.get(SOURCE_ENV_VAR, "").strip()
        return cls(source=source or EXPORT_SOURCE)

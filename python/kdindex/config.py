from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace

ENV_PREFIX = "KDINDEX_"

_TRUE_WORDS = ("1", "true", "yes", "on")


@dataclass(frozen=True)
class KdIndexConfig:
    """Settings for the command line tools.

    Attributes:
        tree_suffix: Suffix appended to the data file name for the serialized tree.
        results_suffix: Suffix appended to the query file name for the results.
        delimiter: Delimiter of point files. None accepts commas and white spaces.
        log_level: Name of the logging level.
        check_brute_force: Verify every query result with linear scan.
    """

    tree_suffix: str = ".kdtree"
    results_suffix: str = ".results"
    delimiter: str | None = None
    log_level: str = "INFO"
    check_brute_force: bool = True

    @classmethod
    def from_env(cls, environ=None) -> KdIndexConfig:
        """Create config overlaid with KDINDEX_* environment variables.

        e.g. KDINDEX_LOG_LEVEL=DEBUG, KDINDEX_CHECK_BRUTE_FORCE=0
        """
        if environ is None:
            environ = os.environ

        config = cls()
        overrides = {}
        for f in fields(cls):
            value = environ.get(ENV_PREFIX + f.name.upper())
            if value is None:
                continue
            if f.name == "check_brute_force":
                overrides[f.name] = value.strip().lower() in _TRUE_WORDS
            elif f.name == "delimiter":
                overrides[f.name] = value or None
            else:
                overrides[f.name] = value
        return replace(config, **overrides)

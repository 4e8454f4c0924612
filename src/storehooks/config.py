"""Runtime configuration read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class Settings:
    """storehooks settings.

    Attributes:
        metadata_path: Directory holding ``entities/*.yaml`` hook declarations
        hook_modules: Modules to import so their @hook functions register
        log_level: Root logging level name used by the CLI
    """

    metadata_path: Path
    hook_modules: list[str] = field(default_factory=list)
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls, base_path: Path | None = None) -> Settings:
        """Create settings from environment variables.

        Resolution order for the metadata path:
        1. STOREHOOKS_METADATA_PATH env var
        2. {base_path}/metadata
        3. ./metadata
        """
        metadata_path = os.environ.get("STOREHOOKS_METADATA_PATH")
        if metadata_path:
            path = Path(metadata_path)
        elif base_path:
            path = base_path / "metadata"
        else:
            path = Path.cwd() / "metadata"

        modules = os.environ.get("STOREHOOKS_HOOK_MODULES", "")
        return cls(
            metadata_path=path,
            hook_modules=[m.strip() for m in modules.split(",") if m.strip()],
            log_level=os.environ.get("STOREHOOKS_LOG_LEVEL", "WARNING").upper(),
        )

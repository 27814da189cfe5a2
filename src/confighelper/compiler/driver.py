import shutil
import subprocess
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import NamedTuple, Optional, Tuple

from ..errors import BuildError, CacheRemovalError
from ..utils.config import ConfigManager

ERROR_LOG_NAME = "errors.log"


@dataclass(frozen=True)
class BuildParameters:
    """
    How to rebuild the host. Created once at startup and never mutated.
    """
    project_name: str
    build_command: Tuple[str, ...]
    project_dir: Path
    cache_dir: Path
    config_file: Optional[Path] = None
    restart_command: Tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_config(cls, config: ConfigManager) -> "BuildParameters":
        watch_file = config.get("watch_file", "")
        restart = tuple(config.get("restart_command") or ())
        if not restart:
            restart = (sys.executable, *sys.argv)
        return cls(
            project_name=config.get("project_name", "confighelper"),
            build_command=tuple(config.get("build_command") or ()),
            project_dir=Path(config.get("project_dir", ".")).expanduser().resolve(),
            cache_dir=Path(config.get("cache_dir", "~/.cache/confighelper")).expanduser(),
            config_file=Path(watch_file).expanduser().resolve() if watch_file else None,
            restart_command=restart,
        )


class CachePaths(NamedTuple):
    cache_dir: Path
    error_log: Path


class BuildDriver:
    """
    Runs the build command and keeps its stderr in ``<cache_dir>/errors.log``.
    """

    def resolve_cache_paths(self, params: BuildParameters) -> CachePaths:
        return CachePaths(
            cache_dir=params.cache_dir,
            error_log=params.cache_dir / ERROR_LOG_NAME,
        )

    def error_log_path(self, params: BuildParameters) -> Path:
        return self.resolve_cache_paths(params).error_log

    def compile(self, params: BuildParameters) -> int:
        """
        Runs the build. A non-zero exit status is not an error here; the
        compiler output lands in the error log either way.
        """
        error_log = self.error_log_path(params)
        error_log.parent.mkdir(parents=True, exist_ok=True)

        if not params.build_command:
            error_log.write_text("")
            raise BuildError("No build command configured.")

        try:
            result = subprocess.run(
                list(params.build_command),
                cwd=str(params.project_dir),
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as e:
            error_log.write_text("")
            raise BuildError(f"Could not run '{params.build_command[0]}': {e}") from e

        error_log.write_text(result.stderr or "")
        return result.returncode

    def get_error_string(self, params: BuildParameters) -> Optional[str]:
        """The error text of the last build, or None if it produced none."""
        error_log = self.error_log_path(params)
        try:
            text = error_log.read_text()
        except FileNotFoundError:
            return None
        return text if text.strip() else None

    def remove_cache(self, path: Path):
        try:
            shutil.rmtree(path)
        except OSError as e:
            raise CacheRemovalError(f"Could not remove cache directory {path}: {e}") from e

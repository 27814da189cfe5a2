import threading
from typing import Callable, Optional, Tuple
from .compiler.driver import BuildDriver, BuildParameters
from .errors import BuildError
from .parsing import parse_diagnostics, DiagnosticRecord
from .utils.config import ConfigManager
from .utils.environment import apply_environment, custom_environment, normalize_overrides
from .utils.host import ConsoleHost, Host, PublishMode
from .utils.state import ConfigHelperState
from .utils.watcher import FileWatcher
import time

class ConfigHelperEngine:
    def __init__(
        self,
        config_manager: Optional[ConfigManager] = None,
        host: Optional[Host] = None,
        driver: Optional[BuildDriver] = None,
    ):
        self.config = config_manager if config_manager else ConfigManager()
        self.state = ConfigHelperState(
            build_parameters=BuildParameters.from_config(self.config),
            environment_overrides=normalize_overrides(self.config.get("environment", [])),
        )
        self.host: Host = host if host else ConsoleHost()
        self.driver = driver if driver else BuildDriver()
        self.watcher = FileWatcher()
        self.on_update_callback: Optional[Callable[[ConfigHelperState], None]] = None
        self.log_file = self.config.get("log_file", "/tmp/confighelper.log")
        # The watcher thread and the UI both trigger builds; environment
        # scoping is process-wide, so builds must not overlap.
        self._build_lock = threading.Lock()

    def _log(self, msg: str):
        if not self.log_file:
            return
        with open(self.log_file, "a") as f:
            f.write(f"[{time.time()}] {msg}\n")

    def ping(self) -> str:
        """Liveness check for the helper."""
        return "Pong"

    def start(self):
        """Watch the configuration file, if one is configured, and recompile on save."""
        config_file = self.state.build_parameters.config_file
        if config_file is None:
            self._log("No watch_file configured, not watching")
            return
        debounce = float(self.config.get("debounce_seconds", 0.5))
        self.watcher.start_watching(str(config_file), self._on_config_saved, debounce)

    def stop(self):
        self.watcher.stop_watching()

    def _on_config_saved(self, path: str):
        self._log(f"{path} changed, recompiling")
        self.recompile()

    def recompile(self) -> Tuple[DiagnosticRecord, ...]:
        """
        Rebuild and replace the diagnostics list with whatever the build
        reported. A failed build is not an error here: its output is the list.
        """
        with self._build_lock:
            return self._recompile()

    def _recompile(self) -> Tuple[DiagnosticRecord, ...]:
        params = self.state.build_parameters
        self._log(f"Recompiling {params.project_name}: {' '.join(params.build_command)}")

        with custom_environment(self.state.environment_overrides):
            try:
                exit_code = self.driver.compile(params)
                self._log(f"Build exited with status {exit_code}")
            except BuildError as e:
                self._log(f"Build Error: {e}")
            error_text = self.driver.get_error_string(params)

        resync = bool(self.config.get("resync_diagnostics", False))
        records = parse_diagnostics(error_text, resync=resync) if error_text else []
        published = self.state.replace_diagnostics(records)
        self._log(f"Published {len(published)} diagnostic(s)")

        self.host.publish_diagnostic_list(published, PublishMode.REPLACE)
        self.host.focus_diagnostic_window()

        if self.on_update_callback:
            self.on_update_callback(self.state)
        return published

    def restart(self, force_clear_cache: bool = False):
        """
        Recompile, make the environment overrides permanent and replace the
        process. Only returns if the host schedules the replacement instead
        of performing it; failures raise.

        With ``force_clear_cache`` the build cache is removed first. Failing
        to remove it aborts the restart before anything is rebuilt.
        """
        params = self.state.build_parameters
        with self._build_lock:
            if force_clear_cache:
                cache_dir = self.driver.resolve_cache_paths(params).cache_dir
                self._log(f"Removing cache directory {cache_dir}")
                self.driver.remove_cache(cache_dir)

            self._recompile()

            apply_environment(self.state.environment_overrides)
            self._log(f"Restarting: {' '.join(params.restart_command)}")
            self.host.request_process_restart(params.restart_command)

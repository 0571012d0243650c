import os
import signal
import threading

from .config import APP_TITLE, CONFIG_FILE, LOCK_FILE_NAME
from .config_store import ConfigError, ConfigStore, malformed_windows
from .enforcer import ProcessEnforcer
from .instance_lock import AlreadyRunningError, InstanceLock
from .logging_setup import setup_logger
from .messages import GeminiClient, MotivationSource, load_api_key
from .notifier import NotificationGate
from .popup import show_blocked, show_info
from .schedule import ScheduleEvaluator
from .snapshot import ConfigSnapshot, ConfigUpdater
from .tray import TrayController
from .utils import ensure_dir


class FocusBlockerApp:
    def __init__(self, config_path: str = CONFIG_FILE, console_log: bool = False):
        config_dir = os.path.dirname(config_path)
        ensure_dir(config_dir)

        self.logger = setup_logger(console=console_log)
        self.logger.info("App start")

        self.instance_lock = InstanceLock(os.path.join(config_dir, LOCK_FILE_NAME))
        self.instance_lock.acquire()

        self.store = ConfigStore(config_path)
        try:
            snapshot = self.store.load()
        except ConfigError:
            self.instance_lock.release()
            raise
        self.logger.info(f"Configuration loaded from {self.store.path}")
        self._warn_malformed(snapshot)

        self.messages = MotivationSource(self._make_client(snapshot), self.logger)
        self.schedule = ScheduleEvaluator(snapshot, self.logger)
        self.gate = NotificationGate(snapshot, self.messages, show_blocked, self.logger)
        self.enforcer = ProcessEnforcer(snapshot, self.schedule, self.gate, self.logger)
        self._updaters: list[ConfigUpdater] = [self.schedule, self.enforcer]

        self.tray = TrayController(APP_TITLE, self.toggle_enabled, self.reload_config, self.quit_app)
        self.tray.set_enabled(snapshot.enabled)
        self.schedule.on_status_change(self.tray.set_productive)

        self._quit_lock = threading.Lock()
        self._stopped = False

    def _make_client(self, snapshot: ConfigSnapshot):
        if not snapshot.ai.enabled:
            return None
        api_key = load_api_key()
        if not api_key:
            self.logger.warning("GEMINI_API_KEY not found, AI messages disabled")
            return None
        self.logger.info(f"Gemini client initialized (model={snapshot.ai.model})")
        return GeminiClient(api_key, model=snapshot.ai.model)

    def _warn_malformed(self, snapshot: ConfigSnapshot) -> None:
        for window in malformed_windows(snapshot):
            self.logger.warning(f"Ignoring malformed time window {window.start}-{window.end}")

    def _show_info(self, title: str, message: str) -> None:
        def _do():
            try:
                show_info(title, message)
            except Exception as e:
                self.logger.error(f"Failed to show popup: {e}")

        threading.Thread(target=_do, name="info-popup", daemon=True).start()

    def apply_config(self, snapshot: ConfigSnapshot) -> None:
        self._warn_malformed(snapshot)
        for updater in self._updaters:
            updater.update_config(snapshot)
        self.schedule.check()
        self.tray.set_enabled(snapshot.enabled)
        self.logger.info("All components updated with new configuration")

    def toggle_enabled(self) -> None:
        try:
            snapshot = self.store.toggle_enabled()
        except OSError as e:
            self.logger.error(f"Failed to save config: {e}")
            return
        self.logger.info(f"Blocking toggled enabled={snapshot.enabled}")
        self.apply_config(snapshot)

    def reload_config(self) -> None:
        self.logger.info("Reloading config")
        try:
            snapshot = self.store.load()
        except ConfigError as e:
            self.logger.error(f"Failed to reload config, keeping current settings: {e}")
            self._show_info("Reload Failed", f"Failed to reload config:\n{e}")
            return
        self.apply_config(snapshot)
        self._show_info("Config Reloaded", "Configuration has been reloaded.\n\nNew settings are now active.")

    def quit_app(self) -> None:
        with self._quit_lock:
            if self._stopped:
                return
            self._stopped = True
        self.logger.info("Quit requested")
        self.enforcer.stop()
        self.schedule.stop()
        self.tray.stop()
        self.instance_lock.release()

    def _install_signal_handlers(self) -> None:
        def _on_signal(signum, frame):
            self.logger.info(f"Received shutdown signal {signal.Signals(signum).name}")
            self.quit_app()

        signal.signal(signal.SIGINT, _on_signal)
        signal.signal(signal.SIGTERM, _on_signal)

    def run(self) -> None:
        self._install_signal_handlers()
        self.schedule.start()
        self.tray.set_productive(self.schedule.is_productive())
        self.enforcer.start()
        self.logger.info("Started successfully - running in system tray")
        self._show_info(
            f"{APP_TITLE} is running",
            f"{APP_TITLE} is running in the system tray.\n\nRight-click the icon to change settings.",
        )
        try:
            self.tray.run()
        finally:
            self.quit_app()
            self.logger.info("App stopped")


def main(console_log: bool = False) -> None:
    try:
        app = FocusBlockerApp(console_log=console_log)
    except AlreadyRunningError:
        show_info(
            f"{APP_TITLE} is already running",
            f"{APP_TITLE} is already active in the system tray.",
        )
        return
    app.run()

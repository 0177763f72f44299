import logging
import sys
from pathlib import Path

from PySide6.QtWidgets import QApplication

ROOT = Path(__file__).resolve().parent
SRC_DIR = ROOT / "src"

if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from core.backend import LibraryBackend
from core.config import APP_NAME, AppConfig
from core.coordinator import LibraryCoordinator
from core.state import AppState
from db.database import initialize_database
from player.player import Player
from ui.main_window import MainWindow
from ui.workers.backend_worker import WorkerDispatcher

logger = logging.getLogger(__name__)

def debug_print_schema(db) -> None:
    cur = db.execute("PRAGMA table_info(tracks)")
    print("\n[tracks table schema]")
    for _cid, name, col_type, _notnull, _default, _pk in cur.fetchall():
        print(f"- {name} ({col_type})")

def init_app_state(config: AppConfig) -> AppState:
    app_state = AppState(config)

    app_state.db = initialize_database(config.app_data_dir)

    if config.debug_schema:
        debug_print_schema(app_state.db)

    app_state.backend = LibraryBackend(config.db_path)
    app_state.player = Player(volume=config.default_volume)
    return app_state

def main() -> int:
    qt_app = QApplication(sys.argv)
    qt_app.setApplicationName(APP_NAME)

    config = AppConfig.from_env()
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Starting %s, data dir %s", APP_NAME, config.app_data_dir)

    app_state = init_app_state(config)
    dispatcher = WorkerDispatcher()
    coordinator = LibraryCoordinator(
        app_state,
        app_state.backend,
        dispatcher,
        app_state.player,
        config=config,
    )

    main_window = MainWindow(app_state, coordinator)
    main_window.show()
    coordinator.start()

    def _shutdown():
        coordinator.shutdown()
        dispatcher.wait_all()
        app_state.db.close()

    qt_app.aboutToQuit.connect(_shutdown)
    return qt_app.exec()

if __name__ == "__main__":
    raise SystemExit(main())

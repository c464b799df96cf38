import os
from pathlib import Path
from typing import Optional

DATA_ROOT_ENV = "LEDGERPRO_DATA_ROOT"


class PathResolver:
    """Centralized path resolver for LedgerPro data files.

    Layout under the data root:
        ledger.db
        config/preferences.json
        reports/
    """
    def __init__(self, root_path: Optional[str | Path] = None):
        if root_path is None:
            root_path = os.environ.get(DATA_ROOT_ENV, "Data")
        self.root = Path(root_path).resolve()

    def db_path(self) -> Path:
        return self.root / "ledger.db"

    def config_dir(self) -> Path:
        return self.root / "config"

    def preferences_file(self) -> Path:
        return self.config_dir() / "preferences.json"

    def reports(self) -> Path:
        return self.root / "reports"

    def report_file(self, filename: str) -> Path:
        return self.reports() / filename

    def ensure_dirs(self) -> None:
        self.config_dir().mkdir(parents=True, exist_ok=True)
        self.reports().mkdir(parents=True, exist_ok=True)

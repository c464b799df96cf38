"""Ledger Preferences Management for LedgerPro.

Provides data-driven configuration with sensible defaults.
"""

import copy
import json
import logging
from pathlib import Path
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Optional, Any, Union
from datetime import date

logger = logging.getLogger(__name__)

# Supported export formats
SUPPORTED_FORMATS = {'xlsx', 'csv'}

# Default preferences (used when nothing is configured)
DEFAULT_PREFERENCES = {
    "$schema": "ledger_preferences_v1",
    "version": "1.0",

    "accounts": {
        "cash_code": "1000",
        "cogs_code": "5000"
    },

    "display": {
        "currency_symbol": "$",
        "decimal_places": 2,
        "negative_in_brackets": False
    },

    "journal": {
        "history_limit": 20
    },

    "dashboard": {
        "recent_entries": 7
    },

    "reports": {
        "default_format": "xlsx",
        "naming_pattern": "LedgerPro_{report_type}_{date}"
    }
}


@dataclass
class AccountsConfig:
    """Distinguished account codes used by the engine."""
    cash_code: str = "1000"
    cogs_code: str = "5000"


@dataclass
class ReportConfig:
    """Configuration for report export."""
    default_format: str = "xlsx"
    naming_pattern: str = "LedgerPro_{report_type}_{date}"

    def generate_filename(self, report_type: str, extension: Optional[str] = None) -> str:
        """Generate filename based on naming pattern."""
        today = date.today().strftime("%Y-%m-%d")
        name = self.naming_pattern.format(report_type=report_type, date=today)
        return f"{name}.{extension or self.default_format}"


@dataclass
class DisplayConfig:
    """Configuration for display formatting."""
    currency_symbol: str = "$"
    decimal_places: int = 2
    negative_in_brackets: bool = False

    def format_currency(self, amount: Union[Decimal, float, int]) -> str:
        """Format amount with currency symbol."""
        if amount < 0 and self.negative_in_brackets:
            return f"({self.currency_symbol}{abs(amount):,.{self.decimal_places}f})"
        return f"{self.currency_symbol}{amount:,.{self.decimal_places}f}"


class LedgerPreferences:
    """
    Preferences for a LedgerPro data root.

    Loads from config/preferences.json with fallback to defaults.

    Usage:
        prefs = LedgerPreferences.load(path_resolver.preferences_file())
        formatted = prefs.display.format_currency(Decimal("1250"))
        cash_code = prefs.accounts.cash_code
    """

    def __init__(self, data: Optional[Dict[str, Any]] = None):
        """Initialize from preference dictionary."""
        if data is None:
            data = copy.deepcopy(DEFAULT_PREFERENCES)
        self._raw = data

        accounts = data.get("accounts", {})
        self.accounts = AccountsConfig(
            cash_code=str(accounts.get("cash_code", "1000")),
            cogs_code=str(accounts.get("cogs_code", "5000")),
        )

        display = data.get("display", {})
        self.display = DisplayConfig(
            currency_symbol=display.get("currency_symbol", "$"),
            decimal_places=int(display.get("decimal_places", 2)),
            negative_in_brackets=display.get("negative_in_brackets", False)
        )

        reports = data.get("reports", {})
        default_format = reports.get("default_format", "xlsx")
        if default_format not in SUPPORTED_FORMATS:
            logger.warning(f"Unsupported report format {default_format!r}, using xlsx")
            default_format = "xlsx"
        self.reports = ReportConfig(
            default_format=default_format,
            naming_pattern=reports.get("naming_pattern", "LedgerPro_{report_type}_{date}")
        )

        self.history_limit = int(data.get("journal", {}).get("history_limit", 20))
        self.recent_entries = int(data.get("dashboard", {}).get("recent_entries", 7))

    @classmethod
    def load(cls, prefs_file: Optional[Path] = None) -> "LedgerPreferences":
        """
        Load preferences with fallback to defaults.

        Args:
            prefs_file: Path to preferences.json (missing file means defaults)

        Returns:
            LedgerPreferences instance
        """
        data = copy.deepcopy(DEFAULT_PREFERENCES)

        if prefs_file is not None and Path(prefs_file).exists():
            try:
                with open(prefs_file, encoding='utf-8') as f:
                    user_data = json.load(f)
                data = cls._deep_merge(data, user_data)
                logger.debug(f"Loaded preferences from {prefs_file}")
            except Exception as e:
                logger.warning(f"Failed to load preferences from {prefs_file}: {e}")

        return cls(data)

    @staticmethod
    def _deep_merge(base: Dict, override: Dict) -> Dict:
        """Deep merge two dictionaries, override takes precedence."""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = LedgerPreferences._deep_merge(result[key], value)
            else:
                result[key] = value
        return result

    def save(self, prefs_file: Path) -> None:
        """Save current preferences."""
        prefs_file = Path(prefs_file)
        prefs_file.parent.mkdir(parents=True, exist_ok=True)

        with open(prefs_file, 'w', encoding='utf-8') as f:
            json.dump(self._raw, f, indent=2)

        logger.info(f"Saved preferences to {prefs_file}")

"""Settings Repository: Access to account settings.

Provides read access to data/settings.json:

    {
        "startingAccountSize": 10000,
        "valuation": {"stalenessThresholdDays": 2, "lookbackDays": 7}
    }

A missing file yields default settings.
"""

from equity_analytics.domain.models import AccountSettings
from equity_analytics.infrastructure.config import (
    DataPaths,
    DEFAULT_PATHS,
    ValuationConfig,
)
from equity_analytics.infrastructure.repositories.base import (
    Repository,
    RepositoryError,
    read_json,
)


class SettingsRepository(Repository[dict]):
    """Repository for account settings.

    Example:
        >>> repo = SettingsRepository()
        >>> repo.get_account_settings().starting_account_size
        10000.0
    """

    def __init__(self, paths: DataPaths = DEFAULT_PATHS):
        self._paths = paths
        self._cache: dict | None = None

    def get_all(self) -> dict:
        """Load raw settings.

        Raises:
            RepositoryError: If the file exists but cannot be parsed
        """
        if self._cache is not None:
            return self._cache

        path = self._paths.settings
        if not path.exists():
            self._cache = {}
            return self._cache

        data = read_json(path, "Settings")
        if not isinstance(data, dict):
            raise RepositoryError("Settings must be a JSON object", str(path))

        self._cache = data
        return self._cache

    def get_account_settings(self) -> AccountSettings:
        """Account settings (starting account size).

        Raises:
            RepositoryError: If the starting account size is invalid
        """
        raw = self.get_all().get("startingAccountSize", 0.0)
        try:
            return AccountSettings(starting_account_size=float(raw or 0.0))
        except (TypeError, ValueError) as e:
            raise RepositoryError(f"Invalid startingAccountSize: {e}", str(self._paths.settings))

    def get_valuation_config(self) -> ValuationConfig:
        """Valuation overrides, defaults where absent.

        Raises:
            RepositoryError: If the overrides are invalid
        """
        try:
            return ValuationConfig.from_dict(self.get_all().get("valuation"))
        except (TypeError, ValueError) as e:
            raise RepositoryError(f"Invalid valuation settings: {e}", str(self._paths.settings))

    def clear_cache(self) -> None:
        """Clear cached data."""
        self._cache = None

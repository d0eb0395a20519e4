"""Rate settings loader."""

import json
import logging
from pathlib import Path

from ..exceptions import ConfigurationError
from ..models import RateSettings

logger = logging.getLogger(__name__)


class RateConfig:
    """Loader for rate-settings.json.

    Expected keys: staffDailyRate, monthlyFixedAmount, lastUpdated, updatedBy.
    """

    def __init__(self, path: Path | None = None):
        self.settings = RateSettings()

        if path and path.exists():
            self.settings = self._load(path)

    def _load(self, path: Path) -> RateSettings:
        with open(path, encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise ConfigurationError(path, f"Invalid JSON: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(path, "Expected a JSON object of rate settings")

        try:
            settings = RateSettings.from_dict(data)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(path, str(e)) from e

        for name, value in (
            ("staffDailyRate", settings.staff_daily_rate),
            ("monthlyFixedAmount", settings.monthly_fixed_amount),
        ):
            if not isinstance(value, (int, float)) or value < 0:
                raise ConfigurationError(path, f"{name} must be a non-negative number")

        logger.info(
            f"Loaded rate settings: daily={settings.staff_daily_rate}, "
            f"monthly={settings.monthly_fixed_amount}"
        )
        return settings

"""
Settings Repository.

Typed get/set over the settings collection. Reads never report a missing
key: the caller's default is returned instead and nothing is written.
"""

from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from notemaster.core.exceptions import ValidationError
from notemaster.core.logging import get_logger
from notemaster.models.document import Collection
from notemaster.repositories.base import BaseRepository
from notemaster.schemas.settings import SETTING_TYPES, SettingKey

logger = get_logger(__name__)


def _setting_key(key: str | SettingKey) -> SettingKey:
    try:
        return SettingKey(key)
    except ValueError:
        raise ValidationError(
            "Unknown setting key",
            details={"key": str(key), "allowed": [k.value for k in SettingKey]},
        ) from None


class SettingsRepository(BaseRepository):
    """Repository for application settings."""

    collection = Collection.SETTINGS

    async def get(self, key: str | SettingKey, default: Any) -> Any:
        """
        Get a setting value.

        Args:
            key: Setting key
            default: Returned when the setting was never written, or when
                the stored value no longer fits the key's type

        Returns:
            The stored value or the default
        """
        setting = _setting_key(key)
        document = await self._get_document(setting.value)
        if document is None:
            return default

        try:
            return SETTING_TYPES[setting].validate_python(document.get("value"))
        except PydanticValidationError:
            logger.warning(
                "Stored setting has an invalid value, using default",
                extra={"key": setting.value},
            )
            return default

    async def put(self, key: str | SettingKey, value: Any) -> Any:
        """
        Write a setting value.

        Returns:
            The validated value as stored

        Raises:
            ValidationError: If the key is unknown or the value has the wrong type
        """
        setting = _setting_key(key)
        adapter = SETTING_TYPES[setting]
        try:
            validated = adapter.validate_python(value)
        except PydanticValidationError as e:
            raise ValidationError(
                f"Invalid value for setting {setting.value}",
                details={setting.value: str(e)},
            ) from e

        await self._put_document(
            {"key": setting.value, "value": adapter.dump_python(validated, mode="json")}
        )
        return validated

    async def get_all(self, defaults: Mapping[str | SettingKey, Any]) -> dict[SettingKey, Any]:
        """Resolve every key in defaults to its stored value or its default."""
        return {
            _setting_key(key): await self.get(key, default)
            for key, default in defaults.items()
        }

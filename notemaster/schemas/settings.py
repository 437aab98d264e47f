"""
Setting Schemas.

Each setting key has exactly one value type. Values are validated on
write and again when read back from the store.
"""

from enum import Enum

from pydantic import StrictBool, TypeAdapter


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"
    SEPIA = "sepia"


class Language(str, Enum):
    TR = "tr"
    EN = "en"


class SettingKey(str, Enum):
    THEME = "theme"
    LANGUAGE = "language"
    SHOW_LINE_NUMBERS = "showLineNumbers"


SETTING_TYPES: dict[SettingKey, TypeAdapter] = {
    SettingKey.THEME: TypeAdapter(Theme),
    SettingKey.LANGUAGE: TypeAdapter(Language),
    SettingKey.SHOW_LINE_NUMBERS: TypeAdapter(StrictBool),
}

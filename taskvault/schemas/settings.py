from typing import Any

from pydantic import BaseModel


class SettingsDocument(BaseModel):
    settings_data: dict[str, Any]

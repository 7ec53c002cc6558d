from functools import lru_cache
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Library settings loaded from DVML_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="DVML_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Default template names
    list_container_template: str = "DynamicListContainer"
    list_template: str = "DynamicList"
    item_container_template: str = "DynamicItemContainer"

    # Template folders for each render kind
    editor_templates: str = "EditorTemplates"
    display_templates: str = "DisplayTemplates"

    # What to do when a GET add-item instruction would carry additional view data:
    # "warn" drops the data and logs once, "raise" fails the render
    get_additional_view_data: Literal["warn", "raise"] = "warn"

    # Application templates, searched before the built-in ones
    templates_dir: Optional[str] = None

    # Where the client script (dvml.js) is served
    static_url: str = "/dvml"

    log_level: str = "INFO"

    def templates_folder(self, editor: bool) -> str:
        return self.editor_templates if editor else self.display_templates


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()

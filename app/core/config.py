"""Localization engine configuration settings."""

from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LocalizationSettings(BaseSettings):
    """Translation loading configuration settings.

    Environment Variables:
        LOCALIZATION_FILES_LOCATION: Directory searched for translation files
        LOCALIZATION_RECOGNIZE_FILE_REFS: Treat values starting with '@' as file references
        LOCALIZATION_DEFAULT_MODE: Text processing mode used when a configuration names none
        LOCALIZATION_TREAT_EMPTY_VALUES_AS_ABSENT: Skip empty cells in table formats
        LOCALIZATION_DESCRIPTION_CAPTION: Header caption of the description column
        LOCALIZATION_COMMENTS_CAPTION: Header caption of the comments column
    """

    files_location: str = Field(
        default="",
        alias="LOCALIZATION_FILES_LOCATION",
        description="Directory searched for translation files (empty: current directory)",
    )
    recognize_file_refs: bool = Field(
        default=False,
        alias="LOCALIZATION_RECOGNIZE_FILE_REFS",
        description="Store values that start with '@' as references to other files",
    )
    default_mode: Optional[str] = Field(
        default=None,
        alias="LOCALIZATION_DEFAULT_MODE",
        description="Text processing mode applied when a configuration does not specify one",
    )
    treat_empty_values_as_absent: bool = Field(
        default=False,
        alias="LOCALIZATION_TREAT_EMPTY_VALUES_AS_ABSENT",
        description="Table formats skip empty cells instead of storing empty text",
    )
    description_caption: str = Field(
        default="Description",
        alias="LOCALIZATION_DESCRIPTION_CAPTION",
        description="Header caption that marks the description column in tables",
    )
    comments_caption: str = Field(
        default="Comments",
        alias="LOCALIZATION_COMMENTS_CAPTION",
        description="Header caption that marks the comments column in tables",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    @field_validator("description_caption", "comments_caption")
    @classmethod
    def validate_caption(cls, value: str) -> str:
        """Reject blank column captions."""
        if not value.strip():
            raise ValueError("Column captions must not be empty")
        return value.strip()


class Settings(BaseSettings):
    """Localization engine configuration settings."""

    PREFIX: str = ""
    LOG_LEVEL: str = "INFO"

    localization: LocalizationSettings

    @property
    def is_production(self) -> bool:
        """Check if the application is running in production."""
        return not bool(self.PREFIX)

    def __init__(self, **kwargs):
        settings_map = {
            "localization": LocalizationSettings,
        }

        for setting_name, setting_class in settings_map.items():
            if setting_name not in kwargs:
                kwargs[setting_name] = setting_class()

        super().__init__(**kwargs)

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )


# Create the settings instance
settings = Settings()

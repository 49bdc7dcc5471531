import logging

from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class Settings(BaseSettings):
    app_name: str = "storygraph"
    env: str = "dev"
    log_level: str = "WARNING"

    story_default_start_id: str = "S01"
    story_default_choice_label: str = "Continue"
    story_max_visible_choices: int = 4
    story_max_cycles_reported: int = 10

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


def configure_logging(level: str | None = None) -> None:
    resolved = str(level or settings.log_level or "WARNING").strip().upper()
    logging.basicConfig(level=getattr(logging, resolved, logging.WARNING), format=LOG_FORMAT)


settings = Settings()

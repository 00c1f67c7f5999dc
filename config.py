from pydantic import field_validator
from pydantic_settings import BaseSettings

from models.priority_level import PriorityLevel
from utils.exceptions import InvalidLevelError

class AppConfig(BaseSettings):
    log_dir: str = "logs"
    log_level: str = "INFO"
    # Level name applied to sub-analyses that declare no cap; None merges them uncapped.
    default_merge_cap: str | None = None

    @field_validator("default_merge_cap")
    @classmethod
    def check_merge_cap(cls, value: str | None) -> str | None:
        if value is None:
            return value
        try:
            return PriorityLevel.from_name(value).name
        except InvalidLevelError as e:
            raise ValueError(str(e)) from e

    class Config:
        env_file = ".env"
        extra = "ignore"

config = AppConfig()

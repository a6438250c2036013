from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

# Load environment variables from .env into os.environ
load_dotenv()


class Settings(BaseSettings):
    """Process-level settings backed by environment variables.

    Connection and query options live in the plugin config file, not here.
    """

    config_path: str = Field(
        default="config.yml",
        validation_alias="RETHINKDB_INPUT_CONFIG",
        description="Path to the YAML plugin configuration used when --config is omitted."
    )
    log_level: str = Field(
        default="INFO",
        validation_alias="RETHINKDB_INPUT_LOG_LEVEL",
        description="Root logging level."
    )
    log_json: bool = Field(
        default=False,
        validation_alias="RETHINKDB_INPUT_LOG_JSON",
        description="Emit logs as JSON lines instead of plain text."
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    def configure_env(self, env: str) -> None:
        """Loads environment-specific variables and reloads settings."""
        if not env:
            return

        load_dotenv(f".env.{env}", override=True)
        new_settings = Settings()
        self.__dict__.update(new_settings.__dict__)


settings = Settings()

"""
Application configuration.

Loads settings from environment variables and .env file.
All configuration is centralized here — no scattered magic strings.
"""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment.

    Attributes:
        project_name: Display name used in the CLI description.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
        database_url: SQLAlchemy URL of the trade sink.
        trades_file: Default path of the XML trade list.
        number_of_trades: Trades written by the generator.
        batch_size: Trades per transaction.
        max_retries: Failed attempts allowed per batch before abandoning it.
        transaction_name_template: Format string with an ``{index}`` field.
        top_n: Instruments listed per direction in the report.
        cap_per_group: Prices summed per instrument in the report.
        failure_rate: Probability that a sink operation fails (0 disables
            fault injection).
        failure_seed: Seed for the fault-injection RNG.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    project_name: str = "tradeloader"
    log_level: str = "INFO"

    database_url: str = "sqlite:///trades.db"
    trades_file: str = "TradesList.xml"
    number_of_trades: int = 1000

    batch_size: int = 21
    max_retries: int = 3
    transaction_name_template: str = "no {index}"

    top_n: int = 3
    cap_per_group: int = 10

    failure_rate: float = 0.0
    failure_seed: Optional[int] = None


settings = Settings()

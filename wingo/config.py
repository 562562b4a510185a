from pydantic_settings import BaseSettings
import logging
import os

DEFAULT_WEIGHTS = {
    'pattern': 0.15,
    'markov': 0.15,
    'frequency': 0.15,
    'neural': 0.20,
    'trend': 0.15,
    'quantum': 0.20,
}

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class Settings(BaseSettings):
    db_dsn: str = os.getenv("DB_DSN", "sqlite:///./data/wingo.db")
    api_key: str | None = os.getenv("API_KEY")
    api_base: str = os.getenv("API_BASE", "http://127.0.0.1:8000")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_dir: str | None = os.getenv("LOG_DIR", "logs")

    # data buffer / market analysis
    buffer_capacity: int = int(os.getenv("BUFFER_CAPACITY", 200))
    market_min_records: int = 30
    market_window: int = 50

    # models
    sequence_lengths: list[int] = [3, 4, 5, 6, 7, 8]
    markov_order: int = 3
    lstm_input_size: int = 20
    lstm_hidden_size: int = 15
    lstm_seed: int | None = None
    initial_weights: dict[str, float] = dict(DEFAULT_WEIGHTS)

    # feed
    feed_base_url: str = os.getenv("FEED_BASE_URL", "https://wingo.oss-ap-southeast-7.aliyuncs.com")
    retry_attempts: int = int(os.getenv("RETRY_ATTEMPTS", 3))
    retry_delay: float = float(os.getenv("RETRY_DELAY", 1.0))
    fetch_timeout: float = 15.0

    # learning schedule
    learning_interval: float = float(os.getenv("LEARNING_INTERVAL", 180))
    model_update_after: int = 10
    min_data_for_prediction: int = int(os.getenv("MIN_DATA_FOR_PREDICTION", 100))


settings = Settings()


def configure_logging(level: str = "INFO", log_dir: str | None = None):
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        err = logging.FileHandler(os.path.join(log_dir, "error.log"))
        err.setLevel(logging.ERROR)
        handlers.append(err)
        handlers.append(logging.FileHandler(os.path.join(log_dir, "combined.log")))
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT, handlers=handlers, force=True)

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    log_level: str = "INFO"
    default_currency: str = "TRY"
    default_response_deadline_minutes: int = 60
    min_response_deadline_minutes: int = 15
    max_response_deadline_minutes: int = 60 * 24 * 7
    notification_webhook_url: str = ""
    notification_timeout: float = 10.0

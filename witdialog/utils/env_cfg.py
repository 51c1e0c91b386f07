import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class WitConfig:
    """
    Dataclass for Wit API configuration.
    """

    access_token: str
    api_url: str
    api_version: str
    request_timeout: int
    max_steps: int


@dataclass(frozen=True)
class PathConfig:
    """
    Dataclass for path configuration.
    """

    logs: Path


def load_wit_env() -> WitConfig:
    """
    Loads Wit API configuration from environment variables or defaults.

    Returns:
        WitConfig: Dataclass containing Wit API configuration.
        - access_token (str): The server access token.
        - api_url (str): The base URL of the API.
        - api_version (str): The API version date sent with each request.
        - request_timeout (int): The request timeout in seconds.
        - max_steps (int): The default step budget for a dispatch run.
    """
    return WitConfig(
        access_token=os.getenv("WIT_ACCESS_TOKEN", ""),
        api_url=os.getenv("WIT_API_URL", "https://api.wit.ai").rstrip("/"),
        api_version=os.getenv("WIT_API_VERSION", "20160526"),
        request_timeout=int(os.getenv("WIT_REQUEST_TIMEOUT", "30")),
        max_steps=int(os.getenv("WIT_MAX_STEPS", "5")),
    )


def load_path_env() -> PathConfig:
    """
    Loads path configuration from environment variables or defaults.

    Returns:
        PathConfig: Dataclass containing path configuration.
        - logs (Path): Path to the logs file.
    """
    default_logs = Path.home() / ".witdialog" / "logs" / "witdialog.log"
    return PathConfig(
        logs=Path(os.getenv("WIT_LOG_FILE", default_logs)).expanduser(),
    )

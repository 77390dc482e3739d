from typing import Dict, List, Optional

from pydantic_settings import BaseSettings


DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/122.0.0.0 Safari/537.36"
)


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables.

    Every field can be set as FEDSEARCH_<FIELD> (e.g. FEDSEARCH_BATCH_SIZE=4).

    - BATCH_SIZE / MAX_INSTANCES: instances raced per batch and the total
      attempt budget across all batches.
    - REQUEST_TIMEOUT: per-request timeout in seconds.
    - BATCH_TIMEOUT / IMAGES_BATCH_TIMEOUT: deadline for a whole batch.
    - FAILURE_THRESHOLD / COOLDOWN_SECONDS: health tracking.
    - CACHE_TTL_SECONDS: how long an aggregated response is served from cache.
    - INSTANCES_PATH: optional YAML file listing instance base URLs.
    """

    user_agent: str = DEFAULT_USER_AGENT
    request_timeout: float = 8.0

    batch_size: int = 8
    max_instances: int = 40
    batch_timeout: float = 8.0
    images_batch_timeout: float = 12.0

    failure_threshold: int = 3
    cooldown_seconds: float = 300.0
    cache_ttl_seconds: float = 600.0

    fallback_instances: int = 8
    fallback_categories: List[str] = ["images", "videos"]
    # Backend category names tried in order on the JSON path; "" sends no categories param.
    category_aliases: Dict[str, List[str]] = {
        "general": [""],
        "images": ["images"],
        "videos": ["videos", "video"],
    }

    instances_path: Optional[str] = None

    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"

    class Config:
        env_prefix = "FEDSEARCH_"
        env_file = ".env"
        env_file_encoding = "utf-8"

    def timeout_for(self, category: str) -> float:
        if category == "images":
            return self.images_batch_timeout
        return self.batch_timeout


def get_settings() -> Settings:
    return Settings()  # type: ignore[call-arg]

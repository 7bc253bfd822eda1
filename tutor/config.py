from dataclasses import dataclass
from dotenv import load_dotenv
import os

DEFAULT_MODEL = "@cf/meta/llama-3.1-8b-instruct"

@dataclass(frozen=True)
class Settings:
    database_url: str = "sqlite:///study_sessions.db"
    default_model: str = DEFAULT_MODEL
    inference_backend: str = "workers-ai" # workers-ai | openai | ollama
    cf_account_id: str = ""
    cf_api_token: str = ""
    cf_api_base: str = "https://api.cloudflare.com/client/v4"
    openai_api_key: str = ""
    ollama_serve_url: str = "http://127.0.0.1:11434"
    inference_timeout: float = 60.0
    graphite_host: str = "localhost"
    graphite_host_port: int = 8125
    metrics_prefix: str = "production.tutorapi"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls):
        load_dotenv()

        return cls(
            database_url=os.getenv("DATABASE_URL", cls.database_url),
            default_model=os.getenv("DEFAULT_MODEL", cls.default_model),
            inference_backend=os.getenv("INFERENCE_BACKEND", cls.inference_backend).lower(),
            cf_account_id=os.getenv("CF_ACCOUNT_ID", cls.cf_account_id),
            cf_api_token=os.getenv("CF_API_TOKEN", cls.cf_api_token),
            cf_api_base=os.getenv("CF_API_BASE", cls.cf_api_base),
            openai_api_key=os.getenv("OPENAI_API_KEY", cls.openai_api_key),
            ollama_serve_url=os.getenv("OLLAMA_SERVE_URL", cls.ollama_serve_url),
            inference_timeout=float(os.getenv("INFERENCE_TIMEOUT", cls.inference_timeout)),
            graphite_host=os.getenv("GRAPHITE_HOST", cls.graphite_host),
            graphite_host_port=int(os.getenv("GRAPHITE_HOST_PORT", cls.graphite_host_port)),
            metrics_prefix=os.getenv("METRICS_PREFIX", cls.metrics_prefix),
            log_level=os.getenv("LOG_LEVEL", cls.log_level),
        )

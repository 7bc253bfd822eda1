from openai import OpenAI
import requests
import json
import statsd
from tutor.log import get_logger

logger = get_logger(__name__)

class InferenceError(Exception):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

class InferenceBackend:
    def __init__(self, metrics: statsd.StatsClient):
        self.metrics = metrics

    # this method should be overriden in the implementation
    def get_completion(self, model_id: str, prompt: str) -> dict:
        return {}

    def run(self, model_id: str, prompt: str) -> dict:
        """
        Send a prompt to the model and return its result mapping.

        The mapping may carry "response", "answer" and "thinking" keys depending on
        the model. Any failure of the underlying client is raised as an InferenceError
        so callers only ever have to handle one exception type.
        """
        try:
            result = self.get_completion(model_id, prompt)
        except InferenceError:
            self.metrics.incr("errors.generate_response")
            raise
        except (requests.exceptions.RequestException, ValueError) as e:
            self.metrics.incr("errors.generate_response")
            raise InferenceError(str(e)) from e

        result = result or {}
        if not isinstance(result, dict):
            self.metrics.incr("errors.generate_response")
            raise InferenceError(f"unexpected model result of type {type(result).__name__}")

        self.metrics.incr("success.generate_response")
        return result


class WorkersAIModel(InferenceBackend):
    def __init__(
        self,
        metrics: statsd.StatsClient,
        account_id: str,
        api_token: str,
        api_base: str = "https://api.cloudflare.com/client/v4",
        timeout: float = 60.0,
    ):
        super().__init__(metrics=metrics)
        self.run_endpoint = f"{api_base.rstrip('/')}/accounts/{account_id}/ai/run"
        self.api_token = api_token
        self.timeout = timeout

    def get_completion(self, model_id: str, prompt: str) -> dict:
        response = requests.post(
            f"{self.run_endpoint}/{model_id}",
            headers={"Authorization": f"Bearer {self.api_token}"},
            json={"prompt": prompt},
            timeout=self.timeout,
        )

        try:
            envelope = response.json()
        except ValueError:
            response.raise_for_status()
            raise

        # workers ai wraps every result as { success, errors, result }
        if not response.ok or not envelope.get("success", False):
            errors = envelope.get("errors") or []
            messages = [error.get("message", "") for error in errors if isinstance(error, dict)]
            raise InferenceError("; ".join(m for m in messages if m) or f"HTTP {response.status_code}")

        return envelope.get("result") or {}


class ChatGPTModel(InferenceBackend):
    def __init__(self, metrics: statsd.StatsClient, openai_api_key: str):
        super().__init__(metrics=metrics)
        self.openai_client = OpenAI(api_key=openai_api_key)

    def get_completion(self, model_id: str, prompt: str) -> dict:
        try:
            response = self.openai_client.chat.completions.create(
                model=model_id, messages=[{"role": "system", "content": prompt}]
            )
        except Exception as e:
            raise InferenceError(str(e)) from e

        return {"response": response.choices.pop().message.content}


class OllamaModel(InferenceBackend):
    def __init__(
        self,
        metrics: statsd.StatsClient,
        ctx_window: int = 4096,
        OLLAMA_SERVE_URL: str = "http://127.0.0.1:11434",
        timeout: float = 60.0,
    ):
        super().__init__(metrics=metrics)
        self.generate_endpoint = f"{OLLAMA_SERVE_URL}/api/generate"
        self.ctx_window = ctx_window
        self.timeout = timeout

    def get_completion(self, model_id: str, prompt: str) -> dict:
        body = {
            "model": model_id,
            "prompt": prompt,
            "options": {
                "num_ctx": self.ctx_window,
            },
        }
        response = requests.post(self.generate_endpoint, data=json.dumps(body), timeout=self.timeout)
        response.raise_for_status()

        # ollama streams one json object per line
        chunks = [json.loads(line) for line in response.content.decode("utf-8").splitlines() if line.strip()]
        for chunk in chunks:
            if chunk.get("error"):
                raise InferenceError(chunk["error"])

        result = {"response": "".join(chunk.get("response") or "" for chunk in chunks)}
        thinking = "".join(chunk.get("thinking") or "" for chunk in chunks)
        if thinking:
            result["thinking"] = thinking
        return result


def build_backend(settings, metrics: statsd.StatsClient) -> InferenceBackend:
    if settings.inference_backend == "openai":
        return ChatGPTModel(metrics=metrics, openai_api_key=settings.openai_api_key)
    if settings.inference_backend == "ollama":
        return OllamaModel(metrics=metrics, OLLAMA_SERVE_URL=settings.ollama_serve_url, timeout=settings.inference_timeout)
    if settings.inference_backend != "workers-ai":
        logger.warning("unknown INFERENCE_BACKEND %r, using workers-ai", settings.inference_backend)
    return WorkersAIModel(
        metrics=metrics,
        account_id=settings.cf_account_id,
        api_token=settings.cf_api_token,
        api_base=settings.cf_api_base,
        timeout=settings.inference_timeout,
    )

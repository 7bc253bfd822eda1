from fastapi import FastAPI
from fastapi.requests import Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from starlette.concurrency import run_in_threadpool
from pydantic import BaseModel, Field, ValidationError
from types import MappingProxyType
from typing import Optional
from tutor.inference import InferenceError
from tutor.prompts import build_socratic_prompt
from tutor.log import get_logger
import statsd
import datetime
import time

logger = get_logger(__name__)

CORS_HEADERS = MappingProxyType({
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
    "Access-Control-Max-Age": "86400",
})

ROUTES = frozenset({
    ("POST", "/api/chat"),
    ("GET", "/api/report"),
})

MODEL_OK = "● 模型正常"
MODEL_ERROR = "● 模型异常"
DB_OK = "● 存储成功"
VEC_ACTIVE = "● 索引活跃"
GUIDE_PLACEHOLDER = "导师正在整理逻辑，请稍后..."
THINKING_PLACEHOLDER = "AI 正在深度检索知识库并生成逻辑链..."


class ModelSelection(BaseModel):
    model: Optional[str] = None


class ChatRequest(BaseModel):
    question: str
    student_id: str
    grade: str
    subject: str
    language: Optional[str] = "zh"
    # "model_config" is reserved by pydantic, so the field is read through its alias
    engine: Optional[ModelSelection] = Field(default=None, alias="model_config")


def shape_output(ai_res: dict) -> dict:
    return {
        "guide_message": ai_res.get("response") or ai_res.get("answer") or GUIDE_PLACEHOLDER,
        "thinking": ai_res.get("thinking") or THINKING_PLACEHOLDER,
        "db_status": DB_OK,
        "vec_status": VEC_ACTIVE,
        "model_status": MODEL_OK,
    }


def create_app(settings, inference, store, metrics: statsd.StatsClient) -> FastAPI:
    app = FastAPI()

    @app.middleware("http")
    async def _cors(request: Request, call_next):
        # preflight and unrouted method/path pairs never reach the routes
        if request.method == "OPTIONS":
            response = Response()
        elif (request.method, request.url.path) not in ROUTES:
            response = PlainTextResponse("Service Online")
        else:
            response = await call_next(request)
        response.headers.update(CORS_HEADERS)
        return response

    @app.post("/api/chat")
    async def _chat(req: Request):
        metrics.incr("chat")
        start_time = time.time()
        try:
            body = await req.json()

            try:
                chat = ChatRequest.model_validate(body)
            except ValidationError as e:
                return JSONResponse(
                    {"error": "invalid chat request", "details": e.errors(include_url=False, include_context=False)},
                    status_code=400,
                )

            model_id = (chat.engine and chat.engine.model) or settings.default_model
            prompt = build_socratic_prompt(chat.grade, chat.subject, chat.question, chat.language)

            try:
                ai_res = await run_in_threadpool(inference.run, model_id, prompt)
            except InferenceError as e:
                logger.error("model %s error: %s", model_id, e.message)
                return JSONResponse(
                    {
                        "error": f"模型 {model_id} 加载失败，请检查配置",
                        "model_status": MODEL_ERROR,
                        "details": e.message,
                    },
                    status_code=500,
                )

            output = shape_output(ai_res)

            # db_status stays optimistic whatever happens here
            stored = True
            try:
                await run_in_threadpool(
                    store.insert,
                    chat.student_id,
                    chat.grade,
                    chat.subject,
                    chat.question,
                    output["guide_message"],
                    datetime.datetime.now(datetime.timezone.utc).isoformat(),
                )
            except Exception:
                stored = False
                logger.exception("failed to store study session for %s", chat.student_id)
            if not stored:
                metrics.incr("errors.store_session")

            metrics.timing("chat.timed", (time.time() - start_time) * 1000)
            return JSONResponse(output)
        except Exception as e:
            logger.exception("chat request failed")
            return JSONResponse({"error": str(e)}, status_code=500)

    @app.get("/api/report")
    async def _report(sid: Optional[str] = None):
        metrics.incr("report")
        try:
            results = await run_in_threadpool(store.count_by_subject, sid)
        except Exception:
            logger.exception("report query failed for %s", sid)
            return JSONResponse({"error": "report unavailable"}, status_code=500)
        return JSONResponse(results)

    return app

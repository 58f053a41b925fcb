"""Public prompt relay routes."""

from __future__ import annotations

from http import HTTPStatus
from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from relay.api.dependencies import get_config, get_executor
from relay.core.config import AppConfig
from relay.core.outcomes import Failed, FailureKind, Outcome
from relay.router.failover import FailoverExecutor

router = APIRouter(prefix="/api")

QUESTION_REQUIRED_MESSAGE = "Question is required."


class ContentResponse(BaseModel):
    content: str


class AnswerResponse(BaseModel):
    answer: str


ASK_EXAMPLES = {
    "arithmetic": {
        "summary": "Simple question",
        "value": {"question": "2+2?"},
    },
    "explain": {
        "summary": "Open question",
        "value": {"question": "Explain API key failover in one sentence."},
    },
}


def failure_status(failure: Failed) -> int:
    """Map a failed outcome onto the HTTP status returned to the client."""
    if failure.kind is FailureKind.ALL_QUOTAS_EXHAUSTED:
        return HTTPStatus.TOO_MANY_REQUESTS
    if failure.kind is FailureKind.SERVICE_UNAVAILABLE:
        return HTTPStatus.SERVICE_UNAVAILABLE
    status = failure.upstream_status
    if status is not None and 400 <= status <= 599:
        return status
    return HTTPStatus.INTERNAL_SERVER_ERROR


def _error_response(failure: Failed) -> JSONResponse:
    return JSONResponse(status_code=failure_status(failure), content={"error": failure.message})


def _content_response(outcome: Outcome):
    if isinstance(outcome, Failed):
        return _error_response(outcome)
    return ContentResponse(content=outcome.text)


@router.get("/joke", response_model=ContentResponse)
async def joke(
    executor: Annotated[FailoverExecutor, Depends(get_executor)],
    config: Annotated[AppConfig, Depends(get_config)],
):
    return _content_response(await executor.execute(config.prompts.joke))


@router.get("/motivation", response_model=ContentResponse)
async def motivation(
    executor: Annotated[FailoverExecutor, Depends(get_executor)],
    config: Annotated[AppConfig, Depends(get_config)],
):
    return _content_response(await executor.execute(config.prompts.motivation))


@router.get("/tip-of-the-day", response_model=ContentResponse)
async def tip_of_the_day(
    executor: Annotated[FailoverExecutor, Depends(get_executor)],
    config: Annotated[AppConfig, Depends(get_config)],
):
    return _content_response(await executor.execute(config.prompts.tip_of_the_day))


@router.post(
    "/ask",
    response_model=AnswerResponse,
    openapi_extra={
        "requestBody": {
            "content": {
                "application/json": {
                    "examples": ASK_EXAMPLES,
                }
            }
        }
    },
)
async def ask(
    executor: Annotated[FailoverExecutor, Depends(get_executor)],
    payload: Annotated[Any, Body()] = None,
):
    # Any body shape is accepted; only a non-blank string question is usable.
    question = payload.get("question") if isinstance(payload, dict) else None
    if not isinstance(question, str) or not question.strip():
        return JSONResponse(
            status_code=HTTPStatus.BAD_REQUEST,
            content={"error": QUESTION_REQUIRED_MESSAGE},
        )

    outcome = await executor.execute(question)
    if isinstance(outcome, Failed):
        return _error_response(outcome)
    return AnswerResponse(answer=outcome.text)

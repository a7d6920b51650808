"""FastAPI application exposing the LLM node assistant."""
from __future__ import annotations

from typing import Callable

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from .config import (DEFAULT_MODEL, LLM_API_KEY_KEY, LLM_API_URL_KEY,
                     LLM_MODEL_KEY, LLMConfig, demo_mode_enabled,
                     get_log_level, get_settings_path, load_llm_config)
from .errors import LLMError
from .features import (ClientFormat, ConnectionTestFeature, FeatureContext,
                       NodeOrganizerFeature, RuleGeneratorFeature)
from .llm import LLMClient, OpenAICompatibleClient
from .log import get_logger, setup_logging
from .nodes import summarise_nodes
from .schemas import (ErrorResponse, GenerateRulesRequest, HealthResponse,
                      LLMResultResponse, LLMSettingsPayload, MessageResponse,
                      OrganizeNodesRequest)
from .settings import JsonFileSettingsStore, SettingsStore

setup_logging(get_log_level())
logger = get_logger(__name__)

ClientFactory = Callable[[LLMConfig], LLMClient]

app = FastAPI(
    title="Node Assistant – LLM helpers for proxy subscriptions",
    version="0.1.0",
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

_settings_store = JsonFileSettingsStore(get_settings_path())


def get_settings_store() -> SettingsStore:
    return _settings_store


def get_client_factory() -> ClientFactory:
    return OpenAICompatibleClient


def reject_in_demo_mode() -> None:
    if demo_mode_enabled():
        raise HTTPException(status_code=403, detail="Not available in demo mode")


def _failure(operation: str, exc: LLMError) -> HTTPException:
    logger.warning("%s failed: %s", operation, exc)
    return HTTPException(status_code=400, detail=f"{operation} failed: {exc}")


def _context_for(config: LLMConfig, client_factory: ClientFactory) -> FeatureContext:
    config.validate()
    return FeatureContext(llm=client_factory(config))


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(status="ok", service="node-assistant")


@app.post(
    "/api/v1/llm/organize-nodes",
    response_model=LLMResultResponse,
    responses={400: {"model": ErrorResponse}, 403: {"model": ErrorResponse}},
    dependencies=[Depends(reject_in_demo_mode)],
)
def organize_nodes(
    request: OrganizeNodesRequest,
    store: SettingsStore = Depends(get_settings_store),
    client_factory: ClientFactory = Depends(get_client_factory),
) -> LLMResultResponse:
    """Group the submitted nodes with the configured LLM."""
    if not request.nodes:
        raise HTTPException(status_code=400, detail="Node list must not be empty")
    nodes = summarise_nodes(node.to_record() for node in request.nodes)
    try:
        ctx = _context_for(load_llm_config(store), client_factory)
        result = NodeOrganizerFeature(ctx).run(nodes, request.instruction)
    except LLMError as exc:
        raise _failure("Node organisation", exc) from exc
    return LLMResultResponse(message="Nodes organised", result=result.content)


@app.post(
    "/api/v1/llm/generate-rules",
    response_model=LLMResultResponse,
    responses={400: {"model": ErrorResponse}, 403: {"model": ErrorResponse}},
    dependencies=[Depends(reject_in_demo_mode)],
)
def generate_rules(
    request: GenerateRulesRequest,
    store: SettingsStore = Depends(get_settings_store),
    client_factory: ClientFactory = Depends(get_client_factory),
) -> LLMResultResponse:
    """Generate client routing rules for the submitted nodes."""
    if not request.nodes:
        raise HTTPException(status_code=400, detail="Node list must not be empty")
    nodes = summarise_nodes(node.to_record() for node in request.nodes)
    try:
        client_format = ClientFormat.parse(request.client_type)
        ctx = _context_for(load_llm_config(store), client_factory)
        result = RuleGeneratorFeature(ctx).run(nodes, client_format, request.instruction)
    except LLMError as exc:
        raise _failure("Rule generation", exc) from exc
    return LLMResultResponse(message="Rules generated", result=result.content)


@app.get(
    "/api/v1/settings/llm",
    response_model=LLMSettingsPayload,
    responses={400: {"model": ErrorResponse}},
)
def get_llm_settings(store: SettingsStore = Depends(get_settings_store)) -> LLMSettingsPayload:
    try:
        return LLMSettingsPayload(
            apiUrl=store.get(LLM_API_URL_KEY),
            apiKey=store.get(LLM_API_KEY_KEY),
            model=store.get(LLM_MODEL_KEY) or DEFAULT_MODEL,
        )
    except LLMError as exc:
        raise _failure("Loading LLM settings", exc) from exc


@app.put(
    "/api/v1/settings/llm",
    response_model=MessageResponse,
    responses={400: {"model": ErrorResponse}, 403: {"model": ErrorResponse}},
    dependencies=[Depends(reject_in_demo_mode)],
)
def update_llm_settings(
    payload: LLMSettingsPayload,
    store: SettingsStore = Depends(get_settings_store),
) -> MessageResponse:
    try:
        store.update(
            {
                LLM_API_URL_KEY: payload.api_url.strip(),
                LLM_API_KEY_KEY: payload.api_key.strip(),
                LLM_MODEL_KEY: payload.model.strip(),
            }
        )
    except LLMError as exc:
        raise _failure("Saving LLM settings", exc) from exc
    return MessageResponse(message="LLM settings saved")


@app.post(
    "/api/v1/settings/llm/test",
    response_model=MessageResponse,
    responses={400: {"model": ErrorResponse}},
)
def test_llm_connection(
    payload: LLMSettingsPayload,
    client_factory: ClientFactory = Depends(get_client_factory),
) -> MessageResponse:
    """Check the submitted (not yet saved) credentials against the API."""
    if not payload.api_url or not payload.api_key:
        raise HTTPException(status_code=400, detail="API URL and API key must not be empty")
    config = LLMConfig(api_url=payload.api_url, api_key=payload.api_key, model=payload.model)
    try:
        ConnectionTestFeature(_context_for(config, client_factory)).run()
    except LLMError as exc:
        raise _failure("Connection test", exc) from exc
    return MessageResponse(message="LLM API connection succeeded")

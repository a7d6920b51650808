"""Pydantic schemas for the node assistant API."""
from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field

from .nodes import NodeRecord


class NodeInput(BaseModel):
    id: int = Field(..., description="Node identifier echoed back by the LLM")
    name: str = ""
    link: str = Field("", description="Share link; only its protocol is forwarded")
    country: str = ""
    group: str = ""

    def to_record(self) -> NodeRecord:
        return NodeRecord(
            id=self.id,
            name=self.name,
            link=self.link,
            country=self.country,
            group=self.group,
        )


class OrganizeNodesRequest(BaseModel):
    nodes: List[NodeInput] = Field(default_factory=list)
    instruction: str = Field("", description="Optional free-text instruction")


class GenerateRulesRequest(BaseModel):
    nodes: List[NodeInput] = Field(default_factory=list)
    client_type: str = Field("", alias="clientType", description="clash, surge or generic")
    instruction: str = Field("", description="Optional free-text instruction")


class LLMResultResponse(BaseModel):
    message: str
    result: str


class LLMSettingsPayload(BaseModel):
    api_url: str = Field("", alias="apiUrl")
    api_key: str = Field("", alias="apiKey")
    model: str = ""


class MessageResponse(BaseModel):
    message: str


class HealthResponse(BaseModel):
    status: str
    service: str


class ErrorResponse(BaseModel):
    detail: str

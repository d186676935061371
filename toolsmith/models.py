from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class Article(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str = ""
    content: str = Field(..., description="Plain-text article body")
    html: str = Field("", description="Readability-sanitized article markup")


class ValidationResult(BaseModel):
    is_valid: bool
    issues: List[str] = Field(default_factory=list)


class ConversationTurn(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class SynthesisResult(BaseModel):
    code: str
    # Only set when the regenerated widget still fails the rubric
    warnings: Optional[List[str]] = None


class RefinementResult(BaseModel):
    code: str
    history: List[ConversationTurn] = Field(default_factory=list)


class PublishedToolMetadata(BaseModel):
    userId: str
    filename: str
    url: str
    createdAt: str
    updatedAt: str


# Request bodies. Field names match what the frontend already sends.

class ExtractRequest(BaseModel):
    url: str = ""


class IdeasRequest(BaseModel):
    content: str = ""


class GenerateRequest(BaseModel):
    content: str = ""
    idea: Optional[str] = Field(default=None, description="Selected tool idea")
    userRequirements: Optional[str] = Field(default=None, description="Free-text requirements; wins over idea")


class UpdateRequest(BaseModel):
    content: str = ""
    currentTool: str = ""
    feedback: str = ""
    history: List[ConversationTurn] = Field(default_factory=list)


class PublishRequest(BaseModel):
    filename: str = ""
    html: str = ""

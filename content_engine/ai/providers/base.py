"""Base interfaces for content generators."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ToolSpec:
  """Function the model is forced to call; `parameters` is its JSON schema."""

  name: str
  description: str
  parameters: dict[str, Any] = field(hash=False)


@dataclass
class StructuredModelResponse:
  """Parsed tool-call arguments plus token usage when reported."""

  content: dict[str, Any]
  usage: dict[str, int] | None = None


class AIModel(ABC):
  """Abstract content generator."""

  name: str

  @abstractmethod
  async def generate_structured(self, system_prompt: str, user_prompt: str, tool: ToolSpec) -> StructuredModelResponse:
    """Return arguments for `tool` or raise a GeneratorError subclass."""


class Provider(ABC):
  """Abstract base class for AI providers."""

  name: str

  @abstractmethod
  def get_model(self, model: str | None = None) -> AIModel:
    """Return the model client for the provider."""

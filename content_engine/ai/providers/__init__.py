"""Provider implementations."""

from content_engine.ai.providers.base import AIModel, Provider, StructuredModelResponse, ToolSpec
from content_engine.ai.providers.gateway import GatewayModel, GatewayProvider, build_generator

__all__ = ["AIModel", "Provider", "StructuredModelResponse", "ToolSpec", "GatewayModel", "GatewayProvider", "build_generator"]

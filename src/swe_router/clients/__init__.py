"""Chat backend clients."""

from swe_router.clients.ollama import BackendModel, OllamaClient, filter_remote

__all__ = ["BackendModel", "OllamaClient", "filter_remote"]

"""Chatbot resource implementation"""

from typing import Any, Dict, Iterable, List, Type, TypeVar, Union, TYPE_CHECKING

import httpx
from pydantic import BaseModel

from ..types.chat import (
    ChatMessage,
    ChatSession,
    CompletionMessage,
    ChatCompletionRequest,
    ChatCompletionResponse,
    ChatHistoryResponse,
    ChatbotModelsResponse,
    ChatbotStatusResponse,
)
from ..types.envelope import ApiResponse

if TYPE_CHECKING:
    from ..client import Client
    from ..async_client import AsyncClient

MessageLike = Union[ChatMessage, CompletionMessage, Dict[str, Any]]
M = TypeVar("M", bound=BaseModel)


def _completion_payload(
    messages: Iterable[MessageLike],
    model: str,
    max_tokens: int,
    temperature: float,
) -> Dict[str, Any]:
    turns: List[CompletionMessage] = []
    for message in messages:
        if isinstance(message, dict):
            turns.append(CompletionMessage(**message))
        else:
            turns.append(CompletionMessage(role=message.role, content=message.content))
    request = ChatCompletionRequest(
        model=model,
        messages=turns,
        max_tokens=max_tokens,
        temperature=temperature,
    )
    return request.model_dump(mode="json")


def _history_payload(user_id: str, chats: Iterable[ChatSession]) -> Dict[str, Any]:
    return {"userId": user_id, "chats": [chat.to_storage() for chat in chats]}


def _parse(model: Type[M], response: httpx.Response) -> M:
    # An empty 2xx body (204 on save) carries no envelope
    if not response.content:
        return model()
    return model.model_validate(response.json())


class ChatbotResource:
    """Synchronous Chatbot resource"""

    def __init__(self, client: "Client"):
        self._client = client

    def complete(
        self,
        messages: Iterable[MessageLike],
        model: str,
        max_tokens: int = 1000,
        temperature: float = 0.7,
    ) -> ChatCompletionResponse:
        """
        Ask the chatbot for the next assistant reply.

        Args:
            messages: Conversation so far, oldest first
            model: Model identifier (e.g. "gemini-1.5-8b")
            max_tokens: Reply length limit (default: 1000)
            temperature: Sampling temperature 0.0-2.0 (default: 0.7)

        Returns:
            ChatCompletionResponse: ``response`` holds the reply text

        Raises:
            ValidationError: Invalid parameters
            ServerError: Inference failed on every attempt
        """
        payload = _completion_payload(messages, model, max_tokens, temperature)
        response = self._client.request("POST", "/api/chatbot/gemini", json=payload)
        return _parse(ChatCompletionResponse, response)

    def get_chats(self) -> ChatHistoryResponse:
        """Chat sessions saved for the authenticated user"""
        response = self._client.request("GET", "/api/chatbot/chats")
        return _parse(ChatHistoryResponse, response)

    def save_chats(self, user_id: str, chats: Iterable[ChatSession]) -> ApiResponse:
        """
        Replace the user's saved chat sessions.

        Args:
            user_id: Owner of the sessions
            chats: Full session list, most recent first

        Returns:
            ApiResponse: Backend confirmation
        """
        response = self._client.request("POST", "/api/chatbot/chats", json=_history_payload(user_id, chats))
        return _parse(ApiResponse, response)

    def models(self) -> ChatbotModelsResponse:
        response = self._client.request("GET", "/api/chatbot/models")
        return _parse(ChatbotModelsResponse, response)

    def status(self) -> ChatbotStatusResponse:
        response = self._client.request("GET", "/api/chatbot/status")
        return _parse(ChatbotStatusResponse, response)


class AsyncChatbotResource:
    """Asynchronous Chatbot resource"""

    def __init__(self, client: "AsyncClient"):
        self._client = client

    async def complete(
        self,
        messages: Iterable[MessageLike],
        model: str,
        max_tokens: int = 1000,
        temperature: float = 0.7,
    ) -> ChatCompletionResponse:
        """
        Ask the chatbot for the next assistant reply.

        Args:
            messages: Conversation so far, oldest first
            model: Model identifier
            max_tokens: Reply length limit (default: 1000)
            temperature: Sampling temperature 0.0-2.0 (default: 0.7)

        Returns:
            ChatCompletionResponse: ``response`` holds the reply text
        """
        payload = _completion_payload(messages, model, max_tokens, temperature)
        response = await self._client.request("POST", "/api/chatbot/gemini", json=payload)
        return _parse(ChatCompletionResponse, response)

    async def get_chats(self) -> ChatHistoryResponse:
        response = await self._client.request("GET", "/api/chatbot/chats")
        return _parse(ChatHistoryResponse, response)

    async def save_chats(self, user_id: str, chats: Iterable[ChatSession]) -> ApiResponse:
        response = await self._client.request(
            "POST", "/api/chatbot/chats", json=_history_payload(user_id, chats)
        )
        return _parse(ApiResponse, response)

    async def models(self) -> ChatbotModelsResponse:
        response = await self._client.request("GET", "/api/chatbot/models")
        return _parse(ChatbotModelsResponse, response)

    async def status(self) -> ChatbotStatusResponse:
        response = await self._client.request("GET", "/api/chatbot/status")
        return _parse(ChatbotStatusResponse, response)

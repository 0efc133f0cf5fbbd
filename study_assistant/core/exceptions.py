"""Custom exception classes for the application."""

from typing import Any


class StudyAssistantError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - {self.details}"
        return self.message


class ConfigurationError(StudyAssistantError):
    """Raised when there's a configuration error."""

    pass


class CanvasAPIError(StudyAssistantError):
    """Raised when a Canvas API call fails.

    ``status_code`` is ``None`` when the request never got a response.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        body: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.status_code = status_code
        self.body = body

    def __str__(self) -> str:
        if self.status_code is None:
            return f"Canvas API error: {self.message}"
        return f"Canvas API error: {self.status_code} - {self.body or self.message}"


class ToolError(StudyAssistantError):
    """Base class for failures while executing a model-requested tool."""

    kind = "tool"

    def __init__(
        self,
        message: str,
        tool_name: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.tool_name = tool_name

    def to_payload(self) -> dict[str, Any]:
        """Error shape fed back to the model as the tool result."""
        payload: dict[str, Any] = {"error": self.message, "kind": self.kind}
        if self.details:
            payload["details"] = self.details
        return payload


class UnknownToolError(ToolError):
    """Raised when the model asks for a tool that is not registered."""

    kind = "unknown_tool"

    def __init__(self, tool_name: str) -> None:
        super().__init__(f"Unknown tool: {tool_name}", tool_name=tool_name)


class ToolInputError(ToolError):
    """Raised when tool arguments are missing or malformed."""

    kind = "input"


class CanvasAuthRequiredError(ToolError):
    """Raised when a credentialed tool runs without a Canvas token."""

    kind = "authentication"

    def __init__(self, tool_name: str) -> None:
        super().__init__(
            "Canvas access token is required. Ask the student to link their Canvas account.",
            tool_name=tool_name,
        )


class ToolExecutionError(ToolError):
    """Raised when the upstream LMS call behind a tool fails."""

    kind = "upstream"

    def __init__(
        self,
        message: str,
        tool_name: str,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, tool_name=tool_name, details=details)
        self.status_code = status_code


class LLMError(StudyAssistantError):
    """Base exception for LLM-related errors."""

    pass


class LLMProviderError(LLMError):
    """Raised when an LLM provider encounters an error."""

    def __init__(
        self,
        message: str,
        provider: str,
        model: str | None = None,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.provider = provider
        self.model = model
        self.status_code = status_code

    def __str__(self) -> str:
        base = f"[{self.provider}] {self.message}"
        if self.model:
            base = f"[{self.provider}/{self.model}] {self.message}"
        if self.details:
            base = f"{base} - {self.details}"
        return base


class LLMRateLimitError(LLMProviderError):
    """Raised when rate limited by an LLM provider."""

    def __init__(
        self,
        message: str,
        provider: str,
        retry_after: float | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, provider, **kwargs)
        self.retry_after = retry_after


class LLMAuthenticationError(LLMProviderError):
    """Raised when authentication with an LLM provider fails."""

    pass


class NoAssistantMessageError(LLMError):
    """Raised when the model returns no usable reply."""

    def __init__(self) -> None:
        super().__init__("No assistant message")


class StepLimitExceededError(LLMError):
    """Raised when the tool loop runs out of steps without a final answer."""

    def __init__(self, max_steps: int) -> None:
        super().__init__(
            f"Exceeded safety step threshold ({max_steps} steps); "
            "the model may be stuck in a tool-use loop"
        )
        self.max_steps = max_steps

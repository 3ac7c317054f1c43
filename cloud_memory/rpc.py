"""JSON-RPC 2.0 message framing for the WebSocket transport."""

import json
from dataclasses import dataclass, field
from typing import Any

JSONRPC_VERSION = "2.0"


# JSON-RPC 2.0 error codes
class ErrorCode:
    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    INTERNAL_ERROR = -32603


class InvalidRequestError(ValueError):
    """Raised when a frame is valid JSON but not a request object."""

    def __init__(self, message: str, request_id: int | str | None = None):
        self.request_id = request_id
        super().__init__(message)


@dataclass
class RPCRequest:
    """JSON-RPC 2.0 request."""

    method: str
    params: dict[str, Any] = field(default_factory=dict)
    id: int | str | None = None
    jsonrpc: str = JSONRPC_VERSION

    def to_dict(self) -> dict[str, Any]:
        return {
            "jsonrpc": self.jsonrpc,
            "method": self.method,
            "params": self.params,
            "id": self.id,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RPCRequest":
        return cls(
            method=data.get("method", ""),
            params=data.get("params") or {},
            id=data.get("id"),
            jsonrpc=data.get("jsonrpc", JSONRPC_VERSION),
        )

    @classmethod
    def parse(cls, raw: str | bytes) -> "RPCRequest":
        """
        Decode one frame.

        Raises json.JSONDecodeError for unparseable text, UnicodeDecodeError for
        bytes that are not UTF-8, and InvalidRequestError for JSON that is not a
        request object.
        """
        payload = json.loads(raw)
        if not isinstance(payload, dict):
            raise InvalidRequestError("Request must be a JSON object")

        request = cls.from_dict(payload)
        if not request.method or not isinstance(request.method, str):
            raise InvalidRequestError("Missing method", request.id)
        if not isinstance(request.params, dict):
            raise InvalidRequestError("Params must be an object", request.id)
        return request


@dataclass
class RPCError:
    """JSON-RPC 2.0 error."""

    code: int
    message: str
    data: Any = None

    def to_dict(self) -> dict[str, Any]:
        d = {"code": self.code, "message": self.message}
        if self.data is not None:
            d["data"] = self.data
        return d


@dataclass
class RPCResponse:
    """JSON-RPC 2.0 response."""

    id: int | str | None
    result: Any = None
    error: RPCError | None = None
    jsonrpc: str = JSONRPC_VERSION

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"jsonrpc": self.jsonrpc, "id": self.id}
        if self.error is not None:
            d["error"] = self.error.to_dict()
        else:
            d["result"] = self.result
        return d

    @classmethod
    def success(cls, id: int | str | None, result: Any) -> "RPCResponse":
        return cls(id=id, result=result)

    @classmethod
    def error_response(
        cls, id: int | str | None, code: int, message: str, data: Any = None
    ) -> "RPCResponse":
        return cls(id=id, error=RPCError(code=code, message=message, data=data))

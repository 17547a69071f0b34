"""Response — the uniform result of a dispatch.

A frozen value that also behaves as a read-only mapping, so transports
can serialize it like any handler-produced dict::

    resp = Response(404, "Not found!")
    resp["code"]          # 404
    resp == {"code": 404, "message": "Not found!"}   # True
    json.dumps(resp.to_dict())
"""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any


@dataclass(frozen=True, slots=True, eq=False)
class Response(Mapping[str, Any]):
    """``{code, message, detail?, **extra}``.

    ``detail`` carries diagnostic context (allowed methods, exception
    message) and is omitted from the mapping when ``None``.
    """

    code: int
    message: str
    detail: str | None = None
    extra: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    def to_dict(self) -> dict[str, Any]:
        """Return the wire shape as a plain dict."""
        result: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.detail is not None:
            result["detail"] = self.detail
        result.update(self.extra)
        return result

    # -- Mapping protocol --

    def __getitem__(self, key: str) -> Any:
        if key == "code":
            return self.code
        if key == "message":
            return self.message
        if key == "detail" and self.detail is not None:
            return self.detail
        return self.extra[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self.to_dict())

    def __len__(self) -> int:
        return len(self.to_dict())

    def __repr__(self) -> str:
        return f"Response({self.to_dict()!r})"

    @property
    def ok(self) -> bool:
        return 200 <= self.code < 400


# -- Terminal outcomes produced by the dispatcher --


def not_found() -> Response:
    return Response(404, "Not found!")


def method_not_allowed(allowed: tuple[str, ...]) -> Response:
    return Response(405, "Method not allowed", detail=f"Allowed methods: {', '.join(allowed)}")


def forbidden(message: str) -> Response:
    return Response(403, message)


def unauthenticated(message: str = "Not Authenticated") -> Response:
    return Response(401, message)


def validation_redirect(location: str, errors: Mapping[str, str]) -> Response:
    """302 pointing back at *location*, with the field errors attached."""
    return Response(
        302,
        "Validation failed",
        detail=location,
        extra=MappingProxyType({"location": location, "errors": dict(errors)}),
    )


def internal_error(exc: BaseException) -> Response:
    return Response(500, "Internal Server Error", detail=str(exc))

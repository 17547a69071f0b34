"""Controller base class.

Controllers are built per request. The dispatcher injects the request
data with ``set_data`` and, when the route declares one, the template
name with ``set_template``; then it calls the route's action with the
path variables as positional arguments::

    class ProductController(Controller):
        def show(self, product_id: str) -> dict:
            return {"code": 200, "message": "OK", "id": product_id,
                    "q": self.data.get("q")}

Subclassing is optional. Any object with ``set_data`` works; ``set_template``
is only used when present.
"""

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class SupportsData(Protocol):
    """What the dispatcher requires of a controller."""

    def set_data(self, data: Mapping[str, Any]) -> None: ...


class Controller:
    """Holds the request data and template for one dispatch."""

    def __init__(self) -> None:
        self.data: dict[str, Any] = {}
        self.template: str | None = None

    def set_data(self, data: Mapping[str, Any]) -> None:
        self.data = dict(data)

    def set_template(self, template: str) -> None:
        self.template = template

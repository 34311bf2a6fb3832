"""
RouteDescriptor model.

Result of routing resolution: which controller and action serve a request.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_ACTION = "default"


class RouteDescriptor(BaseModel):
    """
    Controller/action pair resolved for a request.

    ``controller`` absent means the default controller; ``action`` absent
    means the ``default`` action. ``matched`` is False only for the marker
    route used when resolution failed.
    """

    model_config = ConfigDict(frozen=True)

    controller: Optional[str] = None
    action: Optional[str] = None
    params: Dict[str, Any] = Field(default_factory=dict)
    matched: bool = True

    @property
    def action_name(self) -> str:
        return self.action or DEFAULT_ACTION

    @classmethod
    def unresolved(cls) -> "RouteDescriptor":
        return cls(matched=False)

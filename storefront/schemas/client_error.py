"""
Client error report schema.

Report:  POST /api/client-errors  → ClientErrorReport → 202 {"success": true}
"""
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ClientErrorReport(BaseModel):
    """An error captured in the browser and reported back for tracking."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    message: str = Field(min_length=1, max_length=10_000)
    name: Optional[str] = Field(default=None, description="Error class name, e.g. TypeError.")
    stack: Optional[str] = Field(default=None, description="The browser's own stack trace.")
    url: Optional[str] = None
    user_id: Optional[str] = None
    context: dict[str, Any] = Field(default_factory=dict)

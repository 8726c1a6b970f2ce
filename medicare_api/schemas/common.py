from pydantic import BaseModel
from typing import Any, Optional
import math


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    totalPages: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        return cls(page=page, limit=limit, total=total, totalPages=math.ceil(total / limit) if limit else 0)


def envelope(data: Any = None, message: Optional[str] = None, **extra) -> dict:
    """Success body: ``{success, message?, data?, ...}``; absent keys are omitted, not null."""
    body = {"success": True}
    if message is not None:
        body["message"] = message
    if data is not None:
        body["data"] = data
    body.update(extra)
    return body

from pydantic import BaseModel
from typing import Generic, List, Optional, TypeVar

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Envelope shared by every endpoint: {success, data?, message?, count?}"""
    success: bool = True
    message: Optional[str] = None
    data: Optional[T] = None


class ApiListResponse(BaseModel, Generic[T]):
    success: bool = True
    message: Optional[str] = None
    count: int = 0
    data: List[T] = []


def ok(data=None, message: Optional[str] = None) -> dict:
    return {"success": True, "message": message, "data": data}


def ok_list(items: list, message: Optional[str] = None) -> dict:
    return {"success": True, "message": message, "count": len(items), "data": items}

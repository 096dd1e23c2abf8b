"""Pydantic models for Hygraph GraphQL responses."""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


class AppUser(BaseModel):
    """An AppUser as returned by Hygraph queries and mutations."""
    id: str
    uid: str
    email: Optional[str] = None
    display_name: Optional[str] = Field(default=None, alias="displayName")
    role: Optional[str] = None
    is_active: Optional[bool] = Field(default=None, alias="isActive")


class GraphQLErrorDetail(BaseModel):
    message: str = "GraphQL request failed"
    path: Optional[List[Any]] = None
    extensions: Dict[str, Any] = Field(default_factory=dict)


class GraphQLResponse(BaseModel):
    data: Optional[Dict[str, Any]] = None
    errors: Optional[List[GraphQLErrorDetail]] = None

from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Optional, List, Union
from datetime import datetime


# ──────────────────────────────────────────────
# Parks & resorts (reference data)
# ──────────────────────────────────────────────

class Park(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    country: str = ""
    resort_id: int
    resort_name: str


class Resort(BaseModel):
    id: int
    name: str
    parks: List[Park] = []


# ──────────────────────────────────────────────
# Rides — live
# ──────────────────────────────────────────────

class RideSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    park_id: int
    ride_id: Union[int, str]
    name: str
    wait_minutes: Optional[int] = None     # absent when the park posts no wait
    is_open: Optional[bool] = None         # absent when the provider omits it
    last_updated: Optional[datetime] = None


class RideWait(BaseModel):
    park_id: int
    park_name: str
    ride_name: str
    wait_minutes: Optional[int] = None
    is_open: Optional[bool] = None
    last_updated: Optional[datetime] = None


class WaitLookup(BaseModel):
    query: str
    park_id: Optional[int] = None
    rides: List[RideWait] = []
    fallback: bool = False                 # True when rides is the park's top waits, not a name match


# ──────────────────────────────────────────────
# Web search
# ──────────────────────────────────────────────

class SearchResult(BaseModel):
    title: str
    url: str
    snippet: str = ""


class LiveContext(BaseModel):
    summary: Optional[str] = None
    sources: List[SearchResult] = []
    provider: Optional[str] = None

    @property
    def has_content(self) -> bool:
        return bool(self.summary) or len(self.sources) > 0


# ──────────────────────────────────────────────
# Intent
# ──────────────────────────────────────────────

class IntentDecision(BaseModel):
    wants_web_search: bool = False
    wants_wait_times: bool = False
    effective_query: str = ""
    park_hint: Optional[int] = None


# ──────────────────────────────────────────────
# Chat
# ──────────────────────────────────────────────

class ChatMessage(BaseModel):
    role: str
    content: str


class ChatRequest(BaseModel):
    messages: List[ChatMessage] = Field(..., min_length=1)
    force_search: bool = False


class ChatResponse(BaseModel):
    reply: Any = None
    context: str
    intent: IntentDecision
    ride_waits: List[RideWait] = []
    sources: List[SearchResult] = []

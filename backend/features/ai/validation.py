"""Request contracts for the AI text endpoint.

Bodies are validated as a tagged union on `action`; any failure becomes a
single 400 `invalid_request`, never a partial call to the provider.
"""

import math
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictFloat,
    StrictInt,
    StrictStr,
    TypeAdapter,
    field_validator,
)
from pydantic import ValidationError as PydanticValidationError

from backend.core.errors import ValidationError

MAX_USERNAME_LENGTH = 40
MAX_TIME_OF_DAY_LENGTH = 20
MAX_MOOD_LENGTH = 80
MAX_IDENTITY_LENGTH = 120
MAX_ENTRIES = 60

Number = Union[StrictInt, StrictFloat]


class InvalidAIRequest(ValidationError):
    code = "invalid_request"


def _trimmed(value: str, limit: int) -> str:
    text = value.strip()
    if not text or len(text) > limit:
        raise ValueError(f"must be 1..{limit} characters")
    return text


def _finite(value: float) -> float:
    if not math.isfinite(value):
        raise ValueError("must be a finite number")
    return value


class GreetingPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    username: StrictStr
    time_of_day: StrictStr = Field(alias="timeOfDay")
    current_streak: Number = Field(alias="currentStreak")
    recent_mood: Optional[StrictStr] = Field(default=None, alias="recentMood")

    @field_validator("username")
    @classmethod
    def _username(cls, value: str) -> str:
        return _trimmed(value, MAX_USERNAME_LENGTH)

    @field_validator("time_of_day")
    @classmethod
    def _time_of_day(cls, value: str) -> str:
        return _trimmed(value, MAX_TIME_OF_DAY_LENGTH)

    @field_validator("recent_mood")
    @classmethod
    def _mood(cls, value: Optional[str]) -> Optional[str]:
        return None if value is None else _trimmed(value, MAX_MOOD_LENGTH)

    @field_validator("current_streak")
    @classmethod
    def _streak(cls, value: float) -> int:
        return max(0, math.floor(_finite(value)))


class StarterPackPayload(BaseModel):
    identity: StrictStr

    @field_validator("identity")
    @classmethod
    def _identity(cls, value: str) -> str:
        return _trimmed(value, MAX_IDENTITY_LENGTH)


class AnalysisEntry(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    date: StrictStr
    domains: Dict[str, Any]
    daily_score: Number = Field(alias="dailyScore")

    @field_validator("daily_score")
    @classmethod
    def _score(cls, value: float) -> float:
        return _finite(value)


class AnalysisPayload(BaseModel):
    username: StrictStr
    entries: List[AnalysisEntry] = Field(max_length=MAX_ENTRIES)

    @field_validator("username")
    @classmethod
    def _username(cls, value: str) -> str:
        return _trimmed(value, MAX_USERNAME_LENGTH)


class GreetingRequest(BaseModel):
    action: Literal["greeting"]
    payload: GreetingPayload


class StarterPackRequest(BaseModel):
    action: Literal["starter_pack"]
    payload: StarterPackPayload


class AnalysisRequest(BaseModel):
    action: Literal["analysis"]
    payload: AnalysisPayload


AIRequest = Annotated[
    Union[GreetingRequest, StarterPackRequest, AnalysisRequest],
    Field(discriminator="action"),
]

_adapter = TypeAdapter(AIRequest)


def validate_ai_request(body: Any) -> Union[GreetingRequest, StarterPackRequest, AnalysisRequest]:
    """Parse a raw JSON body. Raises InvalidAIRequest (400) on any problem."""
    if not isinstance(body, dict):
        raise InvalidAIRequest("Invalid request")
    try:
        return _adapter.validate_python(body)
    except PydanticValidationError as exc:
        raise InvalidAIRequest(f"Invalid request: {exc.error_count()} error(s)") from exc

from pydantic import Field, StrictBool, field_validator
from typing import Any, Dict, List, Optional, Union

from app.schemas.base import CamelModel

# Question types produce different answer shapes: option index, text,
# true/false, ordered matches or keyed gap fills.
AnswerValue = Optional[Union[StrictBool, int, float, str, List[Any], Dict[str, Any]]]

class AnswerRecordIn(CamelModel):
    question_id: Union[int, str]
    answer: AnswerValue = None
    is_correct: bool = False
    time_taken: float = Field(default=0, ge=0)

    @field_validator("is_correct", mode="before")
    @classmethod
    def default_is_correct(cls, v):
        return False if v is None else v

    @field_validator("time_taken", mode="before")
    @classmethod
    def default_time_taken(cls, v):
        return 0 if v is None else v

class AnswerRecord(CamelModel):
    question_id: Union[int, str]
    answer: AnswerValue = None
    is_correct: bool = False
    time_taken: float = 0

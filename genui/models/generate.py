from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

from genui.config import config
from genui.models.components import Plan


class GenerateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # Optional at the schema level so an absent message gets the 400 contract
    # instead of FastAPI's generic 422
    message: Optional[str] = Field(default=None, max_length=config.MAX_MESSAGE_LENGTH)
    previous_code: Optional[str] = Field(
        default=None,
        alias="previousCode",
        max_length=config.MAX_PREVIOUS_CODE_LENGTH,
    )


class GenerateResponse(BaseModel):
    plan: Plan
    code: str
    explanation: str
    warnings: list[str] = []

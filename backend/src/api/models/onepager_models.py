from __future__ import annotations

from typing import List, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class ErrorResponse(BaseModel):
    code: str
    message: str


class GenerateOnePagerRequest(BaseModel):
    """Body of POST /api/onepager/generate.

    ``aEmployeeIDs``/``sType`` are accepted for clients of the previous API.
    """

    model_config = ConfigDict(populate_by_name=True)

    employee_ids: List[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("employee_ids", "employeeIds", "aEmployeeIDs"),
        description="Employee identifiers, in the order the documents should be produced",
    )
    mode: Literal["internal", "external"] = Field(
        "internal",
        validation_alias=AliasChoices("mode", "type", "sType"),
        description="'external' anonymizes the name and leaves the avatar out",
    )

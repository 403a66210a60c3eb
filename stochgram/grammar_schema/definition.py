"""
Grammar Definition - a declarative rule table.

A definition is plain data: terminals to register, then rule strings to
compile in order. It is validated on construction, e.g. from a dict:

    GrammarDefinition.model_validate({
        "rules": {"greeting": "hello & name", "name": "1 Ada | 1 Grace"},
        "start": "greeting",
    })
"""

from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class GrammarDefinition(BaseModel):
    """Rule table for building a Grammar."""
    terminals: dict[str, Any] = Field(
        default_factory=dict,
        description="Rule name -> terminal value, registered before any rule",
    )
    rules: dict[str, str] = Field(
        default_factory=dict,
        description="Rule name -> rule text, compiled in order",
    )
    start: Optional[str] = Field(default=None, description="Default rule to generate")

    @field_validator("terminals", "rules")
    @classmethod
    def names_not_empty(cls, value: dict[str, Any]) -> dict[str, Any]:
        for name in value:
            if not name:
                raise ValueError("rule names must not be empty")
        return value

    @model_validator(mode="after")
    def start_is_declared(self) -> "GrammarDefinition":
        if self.start is not None and self.start not in self.rules and self.start not in self.terminals:
            raise ValueError(f"start rule '{self.start}' is not declared")
        return self

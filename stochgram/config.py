"""
Grammar settings.

Settings can be passed explicitly or read from the environment:
- STOCHGRAM_MAX_DEPTH: recursion bound for fallback nodes (default 16, at most 128)
- STOCHGRAM_REPETITION_MODE: "fixed" or "expected" (default "fixed")
- STOCHGRAM_SEED: integer seed for the default random source (default unset)
"""

from __future__ import annotations
from enum import Enum
from typing import Optional
import os

from pydantic import BaseModel, Field

DEFAULT_MAX_DEPTH = 16
# Each depth level costs a few interpreter stack frames
MAX_DEPTH_LIMIT = 128


class RepetitionMode(str, Enum):
    """How a repetition node turns its parameter into a count."""
    FIXED = "fixed"  # rounded to the nearest integer, halves up
    EXPECTED = "expected"  # randomized, expected count equals the parameter


class GrammarSettings(BaseModel):
    """Generation settings for a grammar."""
    max_depth: int = Field(
        default=DEFAULT_MAX_DEPTH,
        gt=0,
        le=MAX_DEPTH_LIMIT,
        description="Fallback depth at which the alternate is used",
    )
    repetition_mode: RepetitionMode = RepetitionMode.FIXED
    seed: Optional[int] = Field(default=None, description="Seed for the default random source")

    model_config = {"frozen": True}

    @classmethod
    def from_env(cls) -> GrammarSettings:
        """Build settings from STOCHGRAM_* environment variables."""
        values: dict[str, object] = {}

        max_depth = os.getenv("STOCHGRAM_MAX_DEPTH")
        if max_depth:
            values["max_depth"] = max_depth

        mode = os.getenv("STOCHGRAM_REPETITION_MODE")
        if mode:
            values["repetition_mode"] = mode.lower()

        seed = os.getenv("STOCHGRAM_SEED")
        if seed:
            values["seed"] = seed

        return cls.model_validate(values)

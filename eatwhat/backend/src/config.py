from __future__ import annotations

import os
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field


class Configuration(BaseModel):
    # Questions
    question_length: Optional[Literal["short", "standard", "long"]] = Field(default=None)
    default_confidence: float = Field(default=0.4, ge=0.0, le=1.0)

    # Quiz sessions
    session_ttl_sec: int = Field(default=3600)
    session_max_answers: int = Field(default=20)

    # Report
    report_top_n: int = Field(default=5)

    # Service
    log_level: str = Field(default="INFO")
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    @classmethod
    def from_env(cls, overrides: Optional[dict[str, Any]] = None) -> "Configuration":
        raw: dict[str, Any] = {}

        env_map = {
            "question_length": os.getenv("QUESTION_LENGTH"),
            "default_confidence": os.getenv("DEFAULT_CONFIDENCE"),
            "session_ttl_sec": os.getenv("SESSION_TTL_SEC"),
            "session_max_answers": os.getenv("SESSION_MAX_ANSWERS"),
            "report_top_n": os.getenv("REPORT_TOP_N"),
            "log_level": os.getenv("LOG_LEVEL"),
            "cors_origins": os.getenv("CORS_ORIGINS"),
        }

        int_fields = {"session_ttl_sec", "session_max_answers", "report_top_n"}
        list_fields = {"cors_origins"}

        for k, v in env_map.items():
            if v is None or v == "":
                continue
            if k in int_fields:
                raw[k] = int(v)
            elif k in list_fields:
                raw[k] = [item.strip() for item in v.split(",") if item.strip()]
            else:
                raw[k] = v

        if overrides:
            raw.update({k: v for k, v in overrides.items() if v is not None})

        return cls(**raw)

    def log_summary(self) -> str:
        return (
            "question_length=%s default_confidence=%.2f session_ttl=%s max_answers=%s report_top_n=%s"
            % (
                self.question_length or "auto",
                self.default_confidence,
                self.session_ttl_sec,
                self.session_max_answers,
                self.report_top_n,
            )
        )

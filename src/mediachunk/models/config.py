"""Analysis and transcription options, normalized once per request."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

DEFAULT_SAMPLE_RATE = 16000


class AnalysisOptions(BaseModel):
    """Silence detection, padding and chunk duration settings."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    silence_threshold_db: float = Field(default=-40, le=0)
    min_silence_duration_ms: int = Field(default=1000, ge=0)
    padding_before_ms: int = Field(default=200, ge=0)
    padding_after_ms: int = Field(default=300, ge=0)
    min_chunk_duration_ms: int = Field(default=500, ge=0)
    max_chunk_duration_ms: int = Field(default=10 * 60 * 1000, gt=0)


class TranscriptionOptions(BaseModel):
    """Speech recognition settings applied to exported chunks."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        protected_namespaces=(),
    )

    enabled: bool = False
    engine: Literal["whisper", "vosk"] = "whisper"
    model_path: str | None = None
    model_name: str = "medium"  # whisper: tiny | base | small | medium | large-v3 ...
    language: str = "auto"
    sample_rate: int = DEFAULT_SAMPLE_RATE
    max_alternatives: int = 0
    enable_words: bool = True
    device: str = "cpu"
    compute_type: str | None = None

    @field_validator("model_path", mode="before")
    @classmethod
    def _resolve_model_path(cls, value: Any) -> str | None:
        if value is None:
            return None
        text = str(value).strip()
        if not text:
            return None
        return str(Path(text).expanduser().resolve())

    @field_validator("sample_rate", mode="before")
    @classmethod
    def _default_sample_rate(cls, value: Any) -> Any:
        if value is None:
            return DEFAULT_SAMPLE_RATE
        try:
            return value if int(value) > 0 else DEFAULT_SAMPLE_RATE
        except (TypeError, ValueError):
            return value

    @field_validator("max_alternatives", mode="before")
    @classmethod
    def _default_max_alternatives(cls, value: Any) -> Any:
        if value is None:
            return 0
        try:
            return value if int(value) >= 0 else 0
        except (TypeError, ValueError):
            return value

    @property
    def resolved_compute_type(self) -> str:
        if self.compute_type:
            return self.compute_type
        return "int8" if self.device == "cpu" else "float16"


def to_field_names(model_cls: type[BaseModel], raw: dict[str, Any]) -> dict[str, Any]:
    """Rename camelCase alias keys to field names; unknown keys pass through."""
    by_alias = {
        field.alias: name
        for name, field in model_cls.model_fields.items()
        if field.alias
    }
    return {by_alias.get(key, key): value for key, value in raw.items()}


def _drop_none(raw: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in raw.items() if v is not None}


def normalize_options(raw: AnalysisOptions | dict[str, Any] | None) -> AnalysisOptions:
    """Fill every missing analysis option with its default."""
    if isinstance(raw, AnalysisOptions):
        return raw
    return AnalysisOptions(**_drop_none(raw or {}))


def normalize_transcription_options(
    raw: TranscriptionOptions | dict[str, Any] | None,
) -> TranscriptionOptions:
    """Fill every missing transcription option with its default."""
    if isinstance(raw, TranscriptionOptions):
        return raw
    return TranscriptionOptions(**_drop_none(raw or {}))

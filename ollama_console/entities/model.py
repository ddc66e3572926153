import re
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Ollama reports nanosecond precision, datetime stops at microseconds
_EXCESS_FRACTION = re.compile(r"(\.\d{6})\d+")


def _trim_timestamp(value):
    if isinstance(value, str):
        return _EXCESS_FRACTION.sub(r"\1", value)
    return value


class ModelDetails(BaseModel):
    """Format and family information reported for a model."""
    parent_model: str = ""
    format: str = ""
    family: str = ""
    families: List[str] = Field(default_factory=list)
    parameter_size: str = ""
    quantization_level: str = ""

    @field_validator("families", mode="before")
    @classmethod
    def none_as_empty(cls, v):
        return v or []


class ModelSummary(BaseModel):
    """One entry of the model listing. Immutable snapshot."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)  # Unique within one inference server
    modified_at: Optional[datetime] = None
    size: int = 0  # Size on disk in bytes
    digest: str = ""
    details: ModelDetails = Field(default_factory=ModelDetails)

    @field_validator("modified_at", mode="before")
    @classmethod
    def trim_nanoseconds(cls, v):
        return _trim_timestamp(v)


class ModelDetail(BaseModel):
    """Details of one model as returned by the show endpoint, with console field names."""
    model_config = ConfigDict(populate_by_name=True)

    license: str = ""
    modelfile_text: str = Field("", alias="modelfile")
    parameters_text: str = Field("", alias="parameters")
    template_text: str = Field("", alias="template")
    system_prompt_text: str = Field("", alias="system")
    details: ModelDetails = Field(default_factory=ModelDetails)


class RunningModel(BaseModel):
    """A model currently loaded by the inference server."""
    name: str
    model: str = ""
    size: int = 0
    digest: str = ""
    details: ModelDetails = Field(default_factory=ModelDetails)
    expires_at: Optional[datetime] = None
    size_vram: Optional[int] = None  # Bytes resident in VRAM

    @field_validator("expires_at", mode="before")
    @classmethod
    def trim_nanoseconds(cls, v):
        return _trim_timestamp(v)

import json
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator


class ScanStartRequest(BaseModel):
    """Inbound scan request as posted by the web service."""

    scan_id: str = Field(..., description="Caller-assigned scan identifier.")
    target_url: str = Field(..., description="http(s) URL to scan.")
    scan_tools: list[str] = Field(
        default_factory=list,
        description="Tools to run, in order (case-insensitive).",
        json_schema_extra={"examples": [["nuclei", "zap"]]},
    )
    scan_tool_name: str | None = Field(
        None,
        description="Single-tool form kept for older callers; merged into `scan_tools`.",
    )
    callback_url: str = Field(..., description="Endpoint that receives the final result.")
    scan_parameters: dict[str, dict[str, Any]] = Field(
        default_factory=dict,
        description="Per-tool parameter bags, e.g. `{'nuclei': {'severity': 'high'}}`.",
    )

    @field_validator("scan_parameters", mode="before")
    @classmethod
    def _decode_parameters(cls, v: Any) -> Any:
        # older callers send the bag JSON-encoded
        if v is None:
            return {}
        if isinstance(v, str):
            try:
                v = json.loads(v)
            except ValueError:
                return {}
        if not isinstance(v, dict):
            return {}
        return {k: p for k, p in v.items() if isinstance(p, dict)}

    @model_validator(mode="after")
    def _merge_single_tool(self) -> "ScanStartRequest":
        if self.scan_tool_name and self.scan_tool_name not in self.scan_tools:
            self.scan_tools = [*self.scan_tools, self.scan_tool_name]
        return self

# servers/ditaa-renderer/src/mcp_ditaa_renderer/models/site_config.py
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..errors import ConfigurationError


class SiteConfig(BaseModel):
    """Process-wide configuration shared by every diagram of a build.

    Mirrors the site-level `_config.yml` of the document pipeline. Only the
    keys below are read; everything else is kept and ignored.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    # option overrides applied to every diagram
    ditaa: Dict[str, Any] = Field(default_factory=dict)
    # pipeline-global text encoding
    encoding: Optional[str] = None
    # legacy settings
    ditaa_debug_mode: Any = None
    ditaa_output_directory: Optional[str] = None

    @field_validator("ditaa", mode="before")
    @classmethod
    def _empty_section(cls, v: Any) -> Any:
        return {} if v is None else v

    @classmethod
    def from_mapping(cls, data: Union["SiteConfig", Mapping[str, Any], None]) -> "SiteConfig":
        if isinstance(data, SiteConfig):
            return data
        try:
            return cls.model_validate(dict(data or {}))
        except ValidationError as e:
            err = e.errors()[0]
            key = str(err["loc"][0]) if err.get("loc") else "site"
            raise ConfigurationError(key, err.get("input"), err.get("msg")) from e

    @classmethod
    def load(cls, path: Union[str, Path]) -> "SiteConfig":
        """Load a YAML site configuration file."""
        p = Path(path)
        raw = p.read_text(encoding="utf-8")
        try:
            data = yaml.safe_load(raw)
        except yaml.YAMLError as e:
            raise ConfigurationError("site", str(p), f"invalid YAML: {e}") from e
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigurationError(
                "site", str(p), f"top-level YAML must be a mapping, got {type(data).__name__}"
            )
        return cls.from_mapping(data)

    def setting(self, key: str) -> Any:
        """Look up a top-level setting by name, including unrecognised keys."""
        if key in type(self).model_fields:
            return getattr(self, key)
        return (self.model_extra or {}).get(key)

# servers/ditaa-renderer/src/mcp_ditaa_renderer/settings.py
from __future__ import annotations

import os
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from common.logging import configure_logging, get_logger

log = get_logger("mcp.ditaa.settings")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(extra="ignore")

    # renderer
    DITAA_BIN: str = Field(default="ditaa")

    # build tree
    SOURCE_DIR: str = Field(default=".")
    OUTPUT_DIR: str = Field(default="_site")
    SITE_CONFIG: Optional[str] = Field(default=None)

    # logging
    LOG_LEVEL: str = Field(default="INFO")
    LOG_JSON: bool = Field(default=True)

    # raise after a site build when any diagram produced no file
    STRICT_RENDER: bool = Field(default=False)

    def configure_logging(self) -> None:
        configure_logging(self.LOG_LEVEL, service_name="mcp.ditaa", structured=self.LOG_JSON)
        log.info(
            "settings.loaded",
            ditaa_bin=self.DITAA_BIN,
            source_dir=self.SOURCE_DIR,
            output_dir=self.OUTPUT_DIR,
            site_config=self.SITE_CONFIG,
            site_config_exists=bool(self.SITE_CONFIG) and os.path.exists(self.SITE_CONFIG or ""),
            strict_render=self.STRICT_RENDER,
        )

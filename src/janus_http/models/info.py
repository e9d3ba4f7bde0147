"""
Server info models for GET /info.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class PluginInfo(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str = ""
    author: Optional[str] = None
    description: Optional[str] = None
    version_string: Optional[str] = None
    version: Optional[int] = None


class ServerInfo(BaseModel):
    model_config = ConfigDict(extra="allow")

    janus: str = "server_info"
    name: str = ""
    version: int = 0
    version_string: Optional[str] = None
    author: Optional[str] = None
    session_timeout: Optional[int] = None
    transports: dict[str, Any] = Field(default_factory=dict)
    plugins: dict[str, PluginInfo] = Field(default_factory=dict)

    def has_plugin(self, plugin_id: str) -> bool:
        return plugin_id in self.plugins

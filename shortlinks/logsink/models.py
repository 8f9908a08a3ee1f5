"""
Wire models for the remote log collector.

Request body (JSON, POST):
    {"stack": "backend", "level": "INFO", "packageName": "service", "message": "..."}

Response body on HTTP success:
    {"logID": "...", "timestamp": "...", "status": "success" | "error"}
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

LogLevel = Literal["INFO", "WARN", "ERROR", "DEBUG"]
LOG_LEVELS = ("INFO", "WARN", "ERROR", "DEBUG")


class LogRequest(BaseModel):
    """One structured event sent to the collector."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    stack: str
    level: LogLevel
    package_name: str = Field(alias="packageName")
    message: str


class LogResponse(BaseModel):
    """Acknowledgment returned by the collector."""
    model_config = ConfigDict(populate_by_name=True)

    log_id: str = Field(alias="logID")
    timestamp: str
    status: Literal["success", "error"]

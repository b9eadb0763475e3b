#!/usr/bin/env python3
"""
fleetconsole API Schemas - Pydantic Models for Request/Response Validation
"""

from typing import Optional
from pydantic import BaseModel, Field, field_validator

SERVER_STATUS_PATTERN = "^(online|offline|maintenance|error)$"
FILE_TYPE_PATTERN = "^(file|directory)$"


class ServerCreate(BaseModel):
    name: str = Field(..., min_length=1)
    hostname: str = Field(..., min_length=1)
    ip_address: str = Field(..., min_length=1)
    port: int = Field(22, ge=1, le=65535)
    description: Optional[str] = None
    status: str = Field("offline", pattern=SERVER_STATUS_PATTERN)
    cpu_cores: Optional[int] = Field(None, ge=1)
    ram_gb: Optional[int] = Field(None, ge=1)
    storage_gb: Optional[int] = Field(None, ge=1)
    os: Optional[str] = None


class ServerStatusUpdate(BaseModel):
    status: str = Field(..., pattern=SERVER_STATUS_PATTERN)


class ServerMetricCreate(BaseModel):
    cpu_usage: Optional[float] = Field(None, ge=0, le=100)
    memory_usage_mb: Optional[float] = Field(None, ge=0)
    memory_total_mb: Optional[float] = Field(None, ge=0)
    disk_usage_gb: Optional[float] = Field(None, ge=0)
    disk_total_gb: Optional[float] = Field(None, ge=0)
    network_in_mb: Optional[float] = Field(None, ge=0)
    network_out_mb: Optional[float] = Field(None, ge=0)
    uptime_seconds: Optional[int] = Field(None, ge=0)
    load_average: Optional[float] = Field(None, ge=0)
    recorded_at: Optional[int] = None


class FileCreate(BaseModel):
    name: str = Field(..., min_length=1)
    path: Optional[str] = None
    type: str = Field("file", pattern=FILE_TYPE_PATTERN)
    size_bytes: Optional[int] = Field(None, ge=0)
    permissions: Optional[str] = None
    owner: Optional[str] = None
    group_name: Optional[str] = None
    modified_at: Optional[int] = None

    @field_validator("name")
    @classmethod
    def name_has_no_slash(cls, v: str) -> str:
        if "/" in v:
            raise ValueError("name must not contain '/'")
        return v


class ConsoleConnect(BaseModel):
    server_id: str


class ConsoleCommand(BaseModel):
    command: str

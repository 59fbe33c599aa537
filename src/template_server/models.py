"""Structured values returned by the template server's tools and resources."""

from dataclasses import dataclass, field
from typing import List


@dataclass
class ExampleData:
    """Example data structure that tools and resources work with."""

    id: int
    name: str
    value: float
    tags: List[str] = field(default_factory=list)


@dataclass
class ServerStatus:
    name: str
    version: str
    uptime_seconds: int
    tools_count: int
    resources_count: int


@dataclass
class ServerConfig:
    max_concurrent_requests: int
    timeout_seconds: int
    debug_mode: bool
    supported_formats: List[str]

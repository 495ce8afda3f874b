"""Scripted crawl state, options and log entries."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from ..config import PROXY_REGIONS


class CrawlState(Enum):
    IDLE = "idle"
    CONNECTING = "connecting"
    CHALLENGE = "challenge"
    RENDERING = "rendering"
    SUCCESS = "success"
    FAILURE = "failure"


# Allowed moves; failure is reachable from every active state
TRANSITIONS: dict[CrawlState, set[CrawlState]] = {
    CrawlState.IDLE: {CrawlState.CONNECTING},
    CrawlState.CONNECTING: {CrawlState.CHALLENGE, CrawlState.FAILURE},
    CrawlState.CHALLENGE: {CrawlState.RENDERING, CrawlState.FAILURE},
    CrawlState.RENDERING: {CrawlState.SUCCESS, CrawlState.FAILURE},
    CrawlState.SUCCESS: {CrawlState.IDLE},
    CrawlState.FAILURE: {CrawlState.IDLE},
}

ACTIVE_STATES = {CrawlState.CONNECTING, CrawlState.CHALLENGE, CrawlState.RENDERING}


@dataclass
class CrawlOptions:
    """Anti-bot toggles. Only affect the scripted log output."""
    stealth_mode: bool = True
    use_residential_proxy: bool = True
    proxy_region: str = PROXY_REGIONS[0]
    auto_captcha: bool = True


@dataclass
class CrawlLogEntry:
    message: str
    level: str = "info"  # info | success | warning | error
    timestamp: datetime = field(default_factory=datetime.now)
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

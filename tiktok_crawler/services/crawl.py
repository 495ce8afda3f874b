"""Scripted crawl - plays the handshake/captcha/render sequence around one extraction call."""

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Callable

from ..config import CRAWL_STEP_DELAYS
from ..models.crawl import ACTIVE_STATES, TRANSITIONS, CrawlLogEntry, CrawlOptions, CrawlState
from ..models.filters import FilterConfig
from ..models.product import ProductRecord
from .extraction import EmptyInputError, ExtractionMode, ExtractionService, ExtractionServiceError

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "错误: 目标页面返回 404 或链接已失效"

# URL fragments that simulate a dead target
FAILURE_MARKERS = ("404", "error")


class CrawlInProgressError(Exception):
    """A crawl was started while another one is still running."""
    pass


class InvalidTransitionError(Exception):
    """State change not allowed by the transition table."""
    pass


class CrawlSimulator:
    """
    State machine: idle -> connecting -> challenge -> rendering -> success | failure.

    The extraction request is submitted when the run enters CONNECTING and
    runs on a worker thread while the scripted steps play. Only the terminal
    transition waits for it.
    """

    def __init__(
        self,
        extraction: ExtractionService,
        sleep: Callable[[float], None] = time.sleep,
        delays: dict[str, float] | None = None,
    ):
        self.extraction = extraction
        self.sleep = sleep
        self.delays = {**CRAWL_STEP_DELAYS, **(delays or {})}
        self.state = CrawlState.IDLE
        self.progress = 0
        self.logs: list[CrawlLogEntry] = []
        self._lock = threading.Lock()

    def run(
        self,
        url: str,
        filters: FilterConfig | None = None,
        options: CrawlOptions | None = None,
    ) -> list[ProductRecord]:
        """
        Run one simulated crawl and return the extracted records.

        Raises:
            EmptyInputError: url is blank (state stays idle, no request made)
            CrawlInProgressError: another run is active
            ExtractionServiceError: dead target or service failure (state ends in FAILURE)
        """
        if not url or not url.strip():
            with self._lock:
                if self.state not in ACTIVE_STATES:
                    self.logs = []
            self._log("错误: 请输入有效的目标 URL", "error")
            raise EmptyInputError("Target URL is empty")

        with self._lock:
            if self.state in ACTIVE_STATES:
                raise CrawlInProgressError(f"Crawl already running (state={self.state.value})")
            if self.state != CrawlState.IDLE:
                self._transition(CrawlState.IDLE)
            self.logs = []
            self.progress = 0
            self._transition(CrawlState.CONNECTING)

        url = url.strip()
        options = options or CrawlOptions()
        should_fail = any(marker in url for marker in FAILURE_MARKERS)

        self._log(f"启动任务: {url}")
        if options.stealth_mode:
            self._log(">>> 隐身模式已激活 (Stealth Mode ON)", "warning")
        if options.use_residential_proxy:
            self._log(f">>> 连接住宅代理池: {options.proxy_region}", "warning")

        with ThreadPoolExecutor(max_workers=1) as executor:
            future = None
            if not should_fail:
                future = executor.submit(self.extraction.simulate_url_extraction, url, filters)

            try:
                self._play_script(options, should_fail)
                if future is None:
                    raise ExtractionServiceError(NOT_FOUND_MESSAGE, ExtractionMode.URL)
                self._log("开始提取 JSON-LD 结构化数据...")
                products = future.result()
            except Exception as e:
                self._fail(e)
                raise

        self.progress = 100
        self._transition(CrawlState.SUCCESS)
        self._log(f"成功采集: 获取到 {len(products)} 条数据", "success")
        return products

    def reset(self):
        """Return a finished crawl to idle."""
        with self._lock:
            if self.state != CrawlState.IDLE:
                self._transition(CrawlState.IDLE)
            self.progress = 0

    def _play_script(self, options: CrawlOptions, should_fail: bool):
        """Timed handshake -> captcha -> render steps."""
        self.sleep(self.delays["connecting"])
        self._log("正在进行 TLS 指纹握手...")
        self.progress = 10

        self._transition(CrawlState.CHALLENGE)
        if options.auto_captcha:
            self._log("检测到安全盾 (Cloudflare/Akamai)...", "warning")
            self._log("正在尝试自动突破验证码...")
        else:
            self._log("检测到安全盾...")
        self.progress = 30
        self.sleep(self.delays["challenge"])

        if options.auto_captcha:
            self._log("验证码突破成功！Access Granted.", "success")
        if should_fail:
            return

        self._transition(CrawlState.RENDERING)
        self._log("页面 DOM 渲染中...")
        if options.stealth_mode:
            self._log("模拟鼠标随机轨迹中...")
        self.progress = 60
        self.sleep(self.delays["rendering"])

    def _fail(self, error: Exception):
        self.progress = 0
        self._transition(CrawlState.FAILURE)
        if isinstance(error, ExtractionServiceError):
            self._log(str(error), "error")
        else:
            self._log(f"错误: {error}", "error")

    def _transition(self, new_state: CrawlState):
        if new_state not in TRANSITIONS[self.state]:
            raise InvalidTransitionError(f"{self.state.value} -> {new_state.value} not allowed")
        logger.debug(f"Crawl state {self.state.value} -> {new_state.value}")
        self.state = new_state

    def _log(self, message: str, level: str = "info"):
        self.logs.append(CrawlLogEntry(message=message, level=level))
        log_level = logging.ERROR if level == "error" else logging.INFO
        logger.log(log_level, message)

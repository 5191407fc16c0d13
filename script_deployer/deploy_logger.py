import logging
import json
from dataclasses import dataclass, asdict
from datetime import datetime
from pathlib import Path
from typing import Optional, Dict, Any

from .config import LOG_FORMAT, DATE_FORMAT, CONSOLE_FORMAT, CONSOLE_DATE_FORMAT

_SIZE_UNITS = ('B', 'KB', 'MB', 'GB')


def format_size(size_bytes: float) -> str:
    for unit in _SIZE_UNITS:
        if size_bytes < 1024 or unit == _SIZE_UNITS[-1]:
            break
        size_bytes /= 1024
    return f"{size_bytes:.2f} {unit}"


@dataclass
class DeployStats:
    """Running totals for one deployer process."""

    total_deploys: int = 0
    successful_deploys: int = 0
    failed_deploys: int = 0
    total_size: int = 0

    @property
    def success_rate(self) -> float:
        if not self.total_deploys:
            return 0.0
        return round(self.successful_deploys * 100 / self.total_deploys, 2)

    def summary(self) -> str:
        return (
            f"{self.successful_deploys}/{self.total_deploys} deploys succeeded "
            f"({self.success_rate}%), {format_size(self.total_size)} sent"
        )


class DeployLogger:
    """Console (and optional file) logging for deploy attempts, with counters.

    With a ``log_dir`` every attempt is also appended as one JSON object per
    line to ``deploy_YYYYMMDD.jsonl``.
    """

    def __init__(
        self,
        name: str = "script_deployer",
        log_dir: Optional[str] = None,
        log_level: str = "INFO",
        console_output: bool = True
    ):
        self.name = name
        self.log_dir = Path(log_dir) if log_dir else None
        level = getattr(logging, log_level.upper(), logging.INFO)

        self.logger = logging.getLogger(name)
        self.logger.setLevel(level)

        for handler in list(self.logger.handlers):
            self.logger.removeHandler(handler)
            handler.close()

        if console_output:
            console_handler = logging.StreamHandler()
            console_handler.setLevel(level)
            console_handler.setFormatter(
                logging.Formatter(CONSOLE_FORMAT, datefmt=CONSOLE_DATE_FORMAT)
            )
            self.logger.addHandler(console_handler)

        if self.log_dir is not None:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(self._dated_file('log'), encoding='utf-8')
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
            self.logger.addHandler(file_handler)

        self.stats = DeployStats()

    def log_deploy_start(self, file_path: str, url: str, file_size: Optional[int] = None):
        size_info = f" (Size: {format_size(file_size)})" if file_size is not None else ""
        self.logger.info(f"Deploying {file_path} to {url}{size_info}")

    def log_deploy_success(
        self,
        file_path: str,
        uri: str,
        url: str,
        status: int,
        file_size: int,
        duration: float
    ):
        self.stats.total_deploys += 1
        self.stats.successful_deploys += 1
        self.stats.total_size += file_size

        self.logger.info(
            f"✓ Successfully deployed script: {uri} | "
            f"Status: {status} | "
            f"Duration: {duration:.2f}s"
        )
        self._journal('SUCCESS', file_path, url, status,
                      size_bytes=file_size, duration_seconds=round(duration, 2))

    def log_deploy_failure(
        self,
        file_path: str,
        uri: str,
        url: str,
        error: Optional[str],
        status: Optional[int] = None
    ):
        self.stats.total_deploys += 1
        self.stats.failed_deploys += 1

        status_info = f" (Status: {status})" if status is not None else ""
        self.logger.error(f"✗ Failed to deploy script: {uri}{status_info}")
        if error:
            self.logger.error(f"Error details: {error}")

        self._journal('FAILED', file_path, url, status, error=error)

    def log_file_detected(self, file_path: str, event_type: str):
        self.logger.info(f"File {event_type}: {file_path}")

    def log_system_event(self, message: str, level: str = "INFO"):
        getattr(self.logger, level.lower())(message)

    def get_stats(self) -> Dict[str, Any]:
        return {**asdict(self.stats), 'success_rate': self.stats.success_rate}

    def print_stats(self):
        self.logger.info(f"Session summary: {self.stats.summary()}")

    def _dated_file(self, suffix: str) -> Path:
        return self.log_dir / f"deploy_{datetime.now().strftime('%Y%m%d')}.{suffix}"

    def _journal(self, status: str, file_path: str, url: str, http_status: Optional[int], **extra):
        if self.log_dir is None:
            return

        entry = {
            'timestamp': datetime.now().isoformat(),
            'status': status,
            'source': file_path,
            'destination': url,
            'http_status': http_status,
            **extra,
        }
        try:
            with open(self._dated_file('jsonl'), 'a', encoding='utf-8') as f:
                f.write(json.dumps(entry, ensure_ascii=False) + "\n")
        except OSError as e:
            self.logger.warning(f"Failed to write deploy journal: {e}")


def get_logger(
    name: str = "script_deployer",
    log_dir: Optional[str] = None,
    log_level: str = "INFO",
    console_output: bool = True
) -> DeployLogger:

    return DeployLogger(
        name=name,
        log_dir=log_dir,
        log_level=log_level,
        console_output=console_output
    )

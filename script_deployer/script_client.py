import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import requests

from .config import API_PREFIX, REQUEST_TIMEOUT
from .errors import ClientInitError


@dataclass(frozen=True)
class DeployTarget:
    """Where a script file is deployed to. Built once from the command line."""

    server: str
    uri: str
    file_path: str

    @property
    def url(self) -> str:
        # The identifier is used verbatim, no escaping
        return f"{self.server}{API_PREFIX}{self.uri}"


@dataclass
class UploadResult:
    success: bool
    status: Optional[int] = None
    error: Optional[str] = None
    duration: float = 0.0


class ScriptClient:
    """Posts script files to the server's script endpoint."""

    def __init__(self, logger, timeout: float = REQUEST_TIMEOUT, session: Optional[requests.Session] = None):
        self.logger = logger
        self.timeout = timeout

        if session is not None:
            self.session = session
            return

        try:
            self.session = requests.Session()
        except Exception as e:
            self.logger.log_system_event(f"✗ Failed to create HTTP client: {e}", "CRITICAL")
            raise ClientInitError(f"Failed to create HTTP client: {e}") from e

    def upload(self, target: DeployTarget) -> UploadResult:
        """Read the file and POST its contents. Never raises for I/O or HTTP failures."""

        url = target.url

        try:
            body = Path(target.file_path).read_bytes()
            # Must be text, but the bytes go out untouched (line endings included)
            body.decode("utf-8")
        except (OSError, UnicodeDecodeError) as e:
            error_msg = f"Could not read {target.file_path}: {e}"
            self.logger.log_deploy_failure(target.file_path, target.uri, url, error_msg)
            return UploadResult(success=False, error=error_msg)

        self.logger.log_deploy_start(target.file_path, url, len(body))
        start_time = time.time()

        try:
            response = self.session.post(url, data=body, timeout=self.timeout)
        except requests.Timeout as e:
            return self._network_failure(target, f"Request timed out after {self.timeout}s: {e}", start_time)
        except requests.ConnectionError as e:
            return self._network_failure(target, f"Connection failed: {e}", start_time)
        except requests.RequestException as e:
            return self._network_failure(target, f"Request failed: {e}", start_time)

        duration = time.time() - start_time

        if 200 <= response.status_code < 300:
            self.logger.log_deploy_success(
                file_path=target.file_path,
                uri=target.uri,
                url=url,
                status=response.status_code,
                file_size=len(body),
                duration=duration
            )
            return UploadResult(success=True, status=response.status_code, duration=duration)

        try:
            error_text = response.text
        except (requests.RequestException, UnicodeDecodeError):
            error_text = None

        self.logger.log_deploy_failure(target.file_path, target.uri, url, error_text, response.status_code)
        return UploadResult(
            success=False,
            status=response.status_code,
            error=error_text,
            duration=duration
        )

    def close(self):
        self.session.close()

    def _network_failure(self, target: DeployTarget, error_msg: str, start_time: float) -> UploadResult:
        self.logger.log_deploy_failure(target.file_path, target.uri, target.url, error_msg)
        return UploadResult(success=False, error=error_msg, duration=time.time() - start_time)

import os
import queue
import time
from enum import Enum

from watchdog.observers import Observer

from .config import SETTLE_DELAY
from .errors import (
    InitialUploadError,
    InputValidationError,
    WatchSubscriptionError,
    NotificationChannelError,
    RedeployUploadError,
)
from .script_client import DeployTarget, ScriptClient
from .watcher import ChangeEvent, EventKind, ScriptFileHandler, WatchError

# Put on the queue to close the channel
CHANNEL_CLOSED = None


class LoopState(str, Enum):
    IDLE = "idle"
    UPLOADING = "uploading"
    TERMINATED = "terminated"


class DeployOutcome(str, Enum):
    ONE_SHOT = "one_shot"
    WATCH = "watch"


class DeployOrchestrator:
    """Initial deployment followed, optionally, by a redeploy-on-change loop.

    Events are consumed one at a time from ``self.events``. Each upload runs to
    completion before the next event is taken, so there is never more than one
    request in flight.
    """

    def __init__(self, target: DeployTarget, client: ScriptClient, logger,
                 settle_delay: float = SETTLE_DELAY, sleep=time.sleep):
        self.target = target
        self.client = client
        self.logger = logger
        self.settle_delay = settle_delay
        self._sleep = sleep

        self.events = queue.Queue()
        self.state = LoopState.IDLE
        self.observer = None

    def validate(self):
        if not os.path.exists(self.target.file_path):
            self.logger.log_system_event(f"✗ Error: File '{self.target.file_path}' does not exist", "ERROR")
            raise InputValidationError(f"File '{self.target.file_path}' does not exist")

    def deploy_initial(self, watch: bool) -> DeployOutcome:
        """Run the first upload. Raises InitialUploadError if it fails."""

        result = self.client.upload(self.target)
        if not result.success:
            detail = result.error or f"server responded with status {result.status}"
            self.logger.log_system_event(f"✗ Initial deployment failed: {detail}", "ERROR")
            raise InitialUploadError(detail)

        if not watch:
            self.logger.log_system_event("One-time deployment completed. Exiting.")
            return DeployOutcome.ONE_SHOT
        return DeployOutcome.WATCH

    def subscribe(self):
        """Start a watchdog observer on the file's directory."""

        handler = ScriptFileHandler(self.target.file_path, self.events.put)
        watch_dir = os.path.dirname(os.path.abspath(self.target.file_path))

        observer = Observer()
        try:
            observer.schedule(handler, watch_dir, recursive=False)
            observer.start()
        except Exception as e:
            self.logger.log_system_event(f"✗ Failed to watch {self.target.file_path}: {e}", "CRITICAL")
            raise WatchSubscriptionError(f"Failed to watch {self.target.file_path}: {e}") from e

        self.observer = observer
        self.logger.log_system_event("Watching for file changes... (Press Ctrl+C to stop)")

    def run_loop(self):
        """Consume events until the channel is closed."""

        self.state = LoopState.IDLE
        while True:
            item = self.events.get()

            if item is CHANNEL_CLOSED:
                self._report(NotificationChannelError("event channel closed"), "WARNING")
                self.state = LoopState.TERMINATED
                return

            if isinstance(item, WatchError):
                self._report(NotificationChannelError(f"Watch error: {item.detail}"))
                continue

            if isinstance(item, ChangeEvent) and item.kind in (EventKind.CREATED, EventKind.MODIFIED):
                self.redeploy(item)

    def redeploy(self, event: ChangeEvent):
        self.state = LoopState.UPLOADING
        self.logger.log_file_detected(event.path, f"{event.kind.value}, redeploying")

        # Give the writer time to finish flushing
        self._sleep(self.settle_delay)

        result = self.client.upload(self.target)
        if not result.success:
            detail = result.error or f"status {result.status}"
            self._report(RedeployUploadError(f"redeployment failed: {detail}"))
        self.state = LoopState.IDLE
        return result

    def _report(self, error, level="ERROR"):
        self.logger.log_system_event(f"✗ {type(error).__name__}: {error}", level)

    def stop(self):
        """Stop the observer and close the event channel."""

        if self.observer is not None:
            self.observer.stop()
            self.observer.join()
            self.observer = None
        self.events.put(CHANNEL_CLOSED)

    def run(self, watch: bool = True) -> int:
        self.validate()
        outcome = self.deploy_initial(watch)
        if outcome is DeployOutcome.ONE_SHOT:
            return 0

        self.subscribe()
        try:
            self.run_loop()
        except KeyboardInterrupt:
            self.logger.log_system_event("Interrupt received. Stopping watcher...", "WARNING")
        finally:
            if self.observer is not None:
                self.observer.stop()
                self.observer.join()
                self.observer = None
            self.logger.print_stats()
        return 0

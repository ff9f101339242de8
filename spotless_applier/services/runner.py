"""
Task Runner.

Launches one external spotless task per invocation and reports its outcome
through a result future, an optional completion callback and the
notification sink.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable

from ..core.exceptions import ExternalTaskError, SpotlessApplierError, TaskStateError
from ..core.logging import get_logger, task_context
from ..core.types import TaskStatus
from ..host.interface import NotificationLevel, NotificationSink, ProcessLauncher
from ..models.build import TaskInvocationSpec

logger = get_logger(__name__)

CompletionCallback = Callable[[bool], None]


class TaskExecution:
    """A single run of a TaskInvocationSpec.

    Moves BUILT -> RUNNING -> COMPLETED | FAILED exactly once. A finished
    execution is never restarted; run the spec again through the TaskRunner
    to get a fresh one.
    """

    def __init__(
        self,
        spec: TaskInvocationSpec,
        launcher: ProcessLauncher,
        notifier: NotificationSink,
        label: str | None = None,
        on_complete: CompletionCallback | None = None,
    ) -> None:
        self.spec = spec
        self.label = label or spec.working_directory
        self.status = TaskStatus.BUILT
        self.error: SpotlessApplierError | None = None
        self._launcher = launcher
        self._notifier = notifier
        self._on_complete = on_complete
        self._future: asyncio.Future[bool] | None = None
        self._task: asyncio.Task[None] | None = None

    @property
    def result(self) -> asyncio.Future[bool]:
        """Future resolving to True on success, False on failure."""
        if self._future is None:
            raise TaskStateError(message="Task has not been started", state=self.status.value)
        return self._future

    @property
    def done(self) -> bool:
        return self.status.is_terminal

    def start(self) -> asyncio.Future[bool]:
        """Schedule the launch on the running loop and return immediately."""
        if self.status is not TaskStatus.BUILT:
            raise TaskStateError(
                message="Task execution can only be started once",
                state=self.status.value,
            )
        loop = asyncio.get_running_loop()
        self._future = loop.create_future()
        self.status = TaskStatus.RUNNING
        self._task = loop.create_task(self._execute())
        self._task.add_done_callback(self._on_task_done)
        return self._future

    async def wait(self) -> bool:
        """Wait for the outcome."""
        return await asyncio.shield(self.result)

    def cancel(self) -> None:
        """Stop waiting for the external task; completes as failed."""
        if self._task is not None and not self._task.done():
            self._task.cancel()

    async def _execute(self) -> None:
        with task_context(self.spec, self.label):
            await self._launch()

    async def _launch(self) -> None:
        command = " ".join(self.spec.task_names)
        logger.info("Launching task", tasks=command, parameters=self.spec.parameters)
        try:
            exit_code = await self._launcher.launch(self.spec)
        except SpotlessApplierError as e:
            self.error = e
            self._complete(False)
            return
        except Exception as e:
            logger.exception("Task launch failed")
            self.error = ExternalTaskError(message="Task launch failed", command=command, cause=e)
            self._complete(False)
            return

        if exit_code != 0:
            self.error = ExternalTaskError(
                message="Task finished with non-zero exit code",
                exit_code=exit_code,
                command=command,
            )
        self._complete(exit_code == 0)

    def _on_task_done(self, task: asyncio.Task[None]) -> None:
        if task.cancelled() and not self.status.is_terminal:
            self.error = ExternalTaskError(
                message="Task cancelled", command=" ".join(self.spec.task_names)
            )
            self._complete(False)

    def _complete(self, success: bool) -> None:
        if self.status.is_terminal:
            return
        self.status = TaskStatus.COMPLETED if success else TaskStatus.FAILED

        if success:
            logger.info("Task completed", module=self.label)
            self._notifier.notify(f"Spotless applied to {self.label}", NotificationLevel.INFO)
        else:
            logger.error("Task failed", module=self.label, error=str(self.error) if self.error else None)
            self._notifier.notify(f"Spotless apply failed for {self.label}", NotificationLevel.ERROR)

        if self._future is not None and not self._future.done():
            self._future.set_result(success)
        if self._on_complete is not None:
            try:
                self._on_complete(success)
            except Exception:
                logger.exception("Completion callback raised", module=self.label)


class TaskRunner:
    """Starts task executions; no retries, no waiting."""

    def __init__(self, launcher: ProcessLauncher, notifier: NotificationSink) -> None:
        self.launcher = launcher
        self.notifier = notifier

    def run(
        self,
        spec: TaskInvocationSpec,
        on_complete: CompletionCallback | None = None,
        label: str | None = None,
    ) -> TaskExecution:
        """Start one execution of ``spec``.

        Must be called from a running event loop. Returns as soon as the
        launch is scheduled; await ``execution.result`` for the outcome.
        """
        execution = TaskExecution(
            spec,
            self.launcher,
            self.notifier,
            label=label,
            on_complete=on_complete,
        )
        execution.start()
        return execution

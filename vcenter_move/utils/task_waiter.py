from __future__ import annotations

import threading
import time
from logging import Logger

import attr
from pyVmomi import vim, vmodl

from vcenter_move.constants import TERMINAL_TASK_STATES
from vcenter_move.exceptions import (
    TaskCancelledException,
    TaskFaultException,
    TaskTimeoutException,
)


class CancellationToken:
    """Flag that can be set from another thread to stop waiting."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self):
        self._event.set()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()


@attr.s(auto_attribs=True, frozen=True)
class TaskOutcome:
    state: str

    @property
    def succeeded(self) -> bool:
        return self.state == vim.TaskInfo.State.success


def get_fault_message(error) -> str:
    if getattr(error, "msg", None):
        return error.msg
    if getattr(error, "faultMessage", None):
        return "; ".join([err.message for err in error.faultMessage])
    return "Task failed with some error"


class VcenterTaskWaiter:
    """Polls the task info until the task is finished."""

    DEFAULT_WAIT_TIME = 2

    def __init__(
        self,
        logger: Logger,
        timeout: float | None = None,
        cancellation_token: CancellationToken | None = None,
        wait_time: float | None = None,
    ):
        self._logger = logger
        self._timeout = timeout
        self._cancellation_token = cancellation_token
        self._wait_time = wait_time or self.DEFAULT_WAIT_TIME

    def _get_deadline(self) -> float | None:
        if self._timeout is None:
            return None
        return time.monotonic() + self._timeout

    def _check_task(self, task, deadline: float | None):
        if self._cancellation_token and self._cancellation_token.is_cancelled:
            self._cancel_task(task)
            raise TaskCancelledException("Waiting for the task was cancelled")
        if deadline is not None and time.monotonic() >= deadline:
            raise TaskTimeoutException(task, self._timeout)

    def _cancel_task(self, task):
        info = task.info
        if info.cancelable and not info.cancelled:
            self._logger.info("Cancelling the vCenter task")
            task.CancelTask()

    def _get_time_to_wait(self, deadline: float | None) -> float:
        if deadline is None:
            return self._wait_time
        return max(0, min(self._wait_time, deadline - time.monotonic()))

    def _wait_for_terminal_state(self, task) -> tuple:
        deadline = self._get_deadline()
        while True:
            info = task.info
            self._logger.debug(f"Task state is {info.state}")
            if info.state in TERMINAL_TASK_STATES:
                return info.state, info.error
            self._check_task(task, deadline)
            time.sleep(self._get_time_to_wait(deadline))

    def wait_for_task(self, task) -> TaskOutcome:
        """Wait for the vCenter task to be processed.

        Raises TaskFaultException if the finished task has an error,
        whatever its state is. If the wait is interrupted the task is
        cancelled in the vCenter when it is cancelable.
        """
        try:
            state, error = self._wait_for_terminal_state(task)
        except KeyboardInterrupt:
            self._cancel_task(task)
            raise
        self._logger.info(f"Task finished with the state {state}")

        if error is not None:
            emsg = get_fault_message(error)
            self._logger.error(f"Task failed: {emsg}")
            raise TaskFaultException(emsg)

        return TaskOutcome(state=state)


class VcenterPropertyWatchTaskWaiter(VcenterTaskWaiter):
    """Waits for the task with the property collector updates.

    A filter on the task's info.state and info.error is created and
    WaitForUpdatesEx is called until the state becomes terminal. Every
    call is limited by the wait time so timeout and cancellation are
    checked between the calls.
    """

    WATCHED_PROPERTIES = ("info.state", "info.error")

    def __init__(
        self,
        logger: Logger,
        property_collector,
        timeout: float | None = None,
        cancellation_token: CancellationToken | None = None,
        wait_time: float | None = None,
    ):
        super().__init__(
            logger=logger,
            timeout=timeout,
            cancellation_token=cancellation_token,
            wait_time=wait_time,
        )
        self._pc = property_collector

    def _create_filter(self, task):
        filter_spec = vmodl.query.PropertyCollector.FilterSpec(
            objectSet=[vmodl.query.PropertyCollector.ObjectSpec(obj=task, skip=False)],
            propSet=[
                vmodl.query.PropertyCollector.PropertySpec(
                    type=vim.Task, pathSet=list(self.WATCHED_PROPERTIES), all=False
                )
            ],
        )
        return self._pc.CreateFilter(filter_spec, True)

    def _get_wait_options(self, deadline: float | None):
        max_wait = max(1, int(round(self._get_time_to_wait(deadline))))
        return vmodl.query.PropertyCollector.WaitOptions(maxWaitSeconds=max_wait)

    @staticmethod
    def _apply_update(update, values: dict):
        for filter_update in update.filterSet or []:
            for object_update in filter_update.objectSet or []:
                for change in object_update.changeSet or []:
                    if change.op in ("remove", "indirectRemove"):
                        values[change.name] = None
                    else:
                        values[change.name] = change.val

    def _wait_for_terminal_state(self, task) -> tuple:
        deadline = self._get_deadline()
        values = dict.fromkeys(self.WATCHED_PROPERTIES)
        version = ""
        pc_filter = self._create_filter(task)
        try:
            while True:
                update = self._pc.WaitForUpdatesEx(
                    version, self._get_wait_options(deadline)
                )
                if update is not None:
                    version = update.version
                    self._apply_update(update, values)
                    self._logger.debug(f"Task state is {values['info.state']}")

                if values["info.state"] in TERMINAL_TASK_STATES:
                    return values["info.state"], values["info.error"]
                self._check_task(task, deadline)
        finally:
            pc_filter.Destroy()

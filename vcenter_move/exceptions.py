class BaseVCenterException(Exception):
    pass


class LoginException(BaseVCenterException):
    """Login Exception."""


class ObjectNotFoundException(BaseVCenterException):
    """Object not found."""


class TaskFaultException(BaseVCenterException):
    """Task Failed."""


class TaskTimeoutException(BaseVCenterException):
    def __init__(self, task, timeout: float):
        self.task = task
        self.timeout = timeout
        super().__init__(f"Task wasn't finished in {timeout} seconds")


class TaskCancelledException(BaseVCenterException):
    """Waiting for the task was cancelled."""


class InvalidAttributeException(BaseVCenterException):
    """Attribute is not valid."""

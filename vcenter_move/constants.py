from pyVmomi import vim

DEFAULT_PORT = 443
DEFAULT_SDK_PATH = "/sdk"
PASSWORD_ENV_VAR = "VCENTER_PASSWORD"

ENTITY_TYPE = vim.ManagedEntity
FOLDER_TYPE = vim.Folder

TERMINAL_TASK_STATES = (vim.TaskInfo.State.success, vim.TaskInfo.State.error)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_NOT_FOUND = 2
EXIT_INTERRUPTED = 130

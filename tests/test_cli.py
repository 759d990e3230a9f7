import unittest

from mock import MagicMock, Mock, patch
from pyVmomi import vim

from vcenter_move.cli import get_task_waiter, main
from vcenter_move.constants import ENTITY_TYPE, FOLDER_TYPE
from vcenter_move.exceptions import LoginException, TaskFaultException
from vcenter_move.flows import MoveResult
from vcenter_move.resource_config import VCenterMoveConfig, WaitMode
from vcenter_move.utils.task_waiter import (
    VcenterPropertyWatchTaskWaiter,
    VcenterTaskWaiter,
)

ARGS = [
    "--url",
    "https://vc.example.com/sdk",
    "--username",
    "user",
    "--password",
    "secret",
    "--entityname",
    "VM-A",
    "--foldername",
    "Archive",
]


class TestMain(unittest.TestCase):
    def setUp(self):
        client_patcher = patch("vcenter_move.cli.VCenterAPIClient")
        flow_patcher = patch("vcenter_move.cli.VCenterMoveFlow")
        self.client_cls = client_patcher.start()
        self.flow_cls = flow_patcher.start()
        self.addCleanup(client_patcher.stop)
        self.addCleanup(flow_patcher.stop)

        self.client = MagicMock()
        self.client.__enter__.return_value = self.client
        self.client.__exit__.return_value = False
        self.client_cls.from_config.return_value = self.client
        self.flow = self.flow_cls.return_value

    def test_moved(self):
        self.flow.move.return_value = MoveResult.MOVED

        self.assertEqual(main(ARGS), 0)
        self.flow.move.assert_called_once_with("VM-A", "Archive")
        self.client.__exit__.assert_called_once()

    def test_not_found_is_not_an_error(self):
        self.flow.move.return_value = MoveResult.NOT_FOUND

        self.assertEqual(main(ARGS), 0)

    def test_not_found_strict(self):
        self.flow.move.return_value = MoveResult.NOT_FOUND

        self.assertEqual(main(ARGS + ["--strict"]), 2)

    def test_failed(self):
        self.flow.move.return_value = MoveResult.FAILED

        self.assertEqual(main(ARGS), 1)

    def test_task_fault(self):
        self.flow.move.side_effect = TaskFaultException("Folder is locked")

        self.assertEqual(main(ARGS), 1)
        self.client.__exit__.assert_called_once()

    def test_login_failed(self):
        self.client.__enter__.side_effect = LoginException("Invalid user/password")

        self.assertEqual(main(ARGS), 1)

    def test_vcenter_fault(self):
        self.flow.move.side_effect = vim.fault.NoPermission(msg="Permission denied")

        self.assertEqual(main(ARGS), 1)

    def test_invalid_config(self):
        self.assertEqual(main(ARGS + ["--timeout", "-1"]), 1)
        self.client_cls.from_config.assert_not_called()

    def test_interrupted(self):
        self.flow.move.side_effect = KeyboardInterrupt

        self.assertEqual(main(ARGS), 130)

    def test_missing_required_argument(self):
        with self.assertRaises(SystemExit):
            main(ARGS[:-2])



class TestMainInterrupted(unittest.TestCase):
    @patch("vcenter_move.utils.task_waiter.time")
    @patch("vcenter_move.cli.VCenterAPIClient")
    def test_interrupt_cancels_move_task(self, client_cls, time_mock):
        # arrange
        vm, folder = Mock(), Mock()
        inventory = {ENTITY_TYPE: {"VM-A": vm}, FOLDER_TYPE: {"Archive": folder}}
        client = MagicMock()
        client.__enter__.return_value = client
        client.__exit__.return_value = False
        client.get_names_in_container.side_effect = (
            lambda container, vim_type: inventory[vim_type]
        )
        client_cls.from_config.return_value = client
        task = client.move_into_folder.return_value
        task.info = Mock(state="running", error=None, cancelable=True, cancelled=False)
        time_mock.sleep.side_effect = KeyboardInterrupt

        # act
        exit_code = main(ARGS + ["--wait-mode", "poll"])

        # assert
        self.assertEqual(exit_code, 130)
        client.move_into_folder.assert_called_once_with(folder, [vm])
        task.CancelTask.assert_called_once_with()
        client.__exit__.assert_called_once()


class TestGetTaskWaiter(unittest.TestCase):
    def _conf(self, wait_mode):
        return VCenterMoveConfig(
            url="vc.example.com",
            user="user",
            password="secret",
            entity_name="VM-A",
            folder_name="Archive",
            wait_mode=wait_mode,
            timeout=60,
        )

    def test_watch(self):
        client = Mock()

        waiter = get_task_waiter(self._conf(WaitMode.WATCH), client, Mock())

        self.assertIsInstance(waiter, VcenterPropertyWatchTaskWaiter)
        self.assertIs(waiter._pc, client.property_collector)
        self.assertEqual(waiter._timeout, 60)

    def test_poll(self):
        waiter = get_task_waiter(self._conf(WaitMode.POLL), Mock(), Mock())

        self.assertIs(type(waiter), VcenterTaskWaiter)

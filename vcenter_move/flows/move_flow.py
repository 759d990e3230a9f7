from __future__ import annotations

from enum import Enum
from logging import Logger
from typing import Callable

import attr

from vcenter_move.api_client import VCenterAPIClient
from vcenter_move.exceptions import ObjectNotFoundException
from vcenter_move.handlers.inventory_handler import InventoryHandler
from vcenter_move.utils.task_waiter import VcenterTaskWaiter


class MoveResult(Enum):
    MOVED = "moved"
    NOT_FOUND = "not found"
    FAILED = "failed"


@attr.s(auto_attribs=True)
class VCenterMoveFlow:
    _vcenter_client: VCenterAPIClient
    _task_waiter: VcenterTaskWaiter
    _logger: Logger
    _output: Callable[[str], None] = print

    def move(self, entity_name: str, folder_name: str) -> MoveResult:
        """Move the managed entity into the folder.

        Nothing is moved if the entity or the folder is not found in the
        inventory, the message is printed and NOT_FOUND is returned.
        """
        inventory = InventoryHandler(self._vcenter_client, self._logger)
        try:
            entity = inventory.get_entity(entity_name)
            folder = inventory.get_folder(folder_name)
        except ObjectNotFoundException as e:
            self._logger.warning(str(e))
            self._output(str(e))
            return MoveResult.NOT_FOUND

        self._logger.info(f"Moving {entity} into the {folder}")
        task = folder.move_into([entity], self._vcenter_client)
        outcome = self._task_waiter.wait_for_task(task)

        if outcome.succeeded:
            self._output(
                f"ManagedEntity '{entity_name}' moved to folder '{folder_name}' "
                f"successfully."
            )
            return MoveResult.MOVED

        self._output("Failure -: Managed Entity cannot be moved")
        return MoveResult.FAILED

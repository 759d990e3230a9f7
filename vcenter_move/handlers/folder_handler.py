from __future__ import annotations

from typing import TYPE_CHECKING

from pyVmomi import vim

from vcenter_move.handlers.managed_entity_handler import ManagedEntityHandler

if TYPE_CHECKING:
    from vcenter_move.api_client import VCenterAPIClient


class FolderHandler(ManagedEntityHandler):
    _entity: vim.Folder

    def __str__(self) -> str:
        return f"Folder '{self.name}'"

    def move_into(
        self, entities: list[ManagedEntityHandler], vcenter_client: VCenterAPIClient
    ):
        """Submit the move of the entities into the folder and return the task."""
        return vcenter_client.move_into_folder(
            self._entity, [entity.entity for entity in entities]
        )

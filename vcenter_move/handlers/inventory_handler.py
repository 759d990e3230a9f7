from __future__ import annotations

from logging import Logger

import attr

from vcenter_move.api_client import VCenterAPIClient
from vcenter_move.constants import ENTITY_TYPE, FOLDER_TYPE
from vcenter_move.exceptions import InvalidAttributeException, ObjectNotFoundException
from vcenter_move.handlers.folder_handler import FolderHandler
from vcenter_move.handlers.managed_entity_handler import ManagedEntityHandler


class EntityNotFound(ObjectNotFoundException):
    kind = "ManagedEntity"

    def __init__(self, name: str):
        self.name = name
        super().__init__(
            f"Unable to find a managed entity named '{name}' in the Inventory"
        )


class FolderNotFound(ObjectNotFoundException):
    kind = "Folder"

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unable to find folder '{name}' in the Inventory")


@attr.s(auto_attribs=True)
class InventoryHandler:
    _vcenter_client: VCenterAPIClient
    _logger: Logger

    def _find(self, vim_type, name: str, container=None):
        if not name:
            raise InvalidAttributeException("Name of the object should not be empty")
        if container is None:
            container = self._vcenter_client.root_container

        names = self._vcenter_client.get_names_in_container(container, vim_type)
        return names.get(name)

    def get_entity(self, name: str, container=None) -> ManagedEntityHandler:
        self._logger.info(f"Resolving managed entity '{name}'")
        entity = self._find(ENTITY_TYPE, name, container)
        if entity is None:
            raise EntityNotFound(name)
        return ManagedEntityHandler(entity)

    def get_folder(self, name: str, container=None) -> FolderHandler:
        self._logger.info(f"Resolving folder '{name}'")
        folder = self._find(FOLDER_TYPE, name, container)
        if folder is None:
            raise FolderNotFound(name)
        return FolderHandler(folder)

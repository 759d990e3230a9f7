from __future__ import annotations

from functools import cached_property
from logging import Logger

from pyVmomi import vim

from vcenter_move.exceptions import LoginException
from vcenter_move.resource_config import VCenterMoveConfig
from vcenter_move.utils.client_helpers import disconnect_si, get_si


class VCenterAPIClient:
    def __init__(
        self,
        host: str,
        user: str,
        password: str,
        logger: Logger,
        port: int = 443,
        path: str = "/sdk",
        verify_ssl: bool = True,
    ):
        self._host = host
        self._user = user
        self._password = password
        self._port = port
        self._path = path
        self._verify_ssl = verify_ssl
        self._logger = logger

    @classmethod
    def from_config(cls, conf: VCenterMoveConfig, logger: Logger) -> VCenterAPIClient:
        return cls(
            conf.address,
            conf.user,
            conf.password,
            logger,
            port=conf.port,
            path=conf.path,
            verify_ssl=conf.verify_ssl,
        )

    def __enter__(self) -> VCenterAPIClient:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.disconnect()

    def _get_si(self):
        self._logger.info(f"Connecting to the vCenter {self._host}:{self._port}...")
        try:
            si = get_si(
                self._host,
                self._user,
                self._password,
                port=self._port,
                path=self._path,
                verify_ssl=self._verify_ssl,
            )
        except vim.fault.InvalidLogin:
            self._logger.exception("Unable to login to the vCenter")
            raise LoginException("Can't connect to the vCenter. Invalid user/password")
        return si

    @cached_property
    def _si(self):
        return self._get_si()

    def disconnect(self):
        if "_si" in self.__dict__:
            self._logger.info("Disconnecting from the vCenter")
            disconnect_si(self.__dict__.pop("_si"))

    @property
    def root_container(self):
        return self._si.content.rootFolder

    @property
    def property_collector(self):
        return self._si.content.propertyCollector

    def create_container_view(self, container, vim_type, recursive=True):
        if not isinstance(vim_type, list):
            vim_type = [vim_type]
        return self._si.content.viewManager.CreateContainerView(
            container, vim_type, recursive
        )

    def get_names_in_container(self, container, vim_type) -> dict:
        """Get names of all objects of the type under the container.

        Objects are collected recursively, the container itself is not
        included. Names aren't unique in the vCenter so the last object
        with the same name wins.
        """
        view = self.create_container_view(container, vim_type, recursive=True)
        try:
            object_spec = vim.PropertyCollector.ObjectSpec(
                obj=view,
                skip=True,
                selectSet=[
                    vim.PropertyCollector.TraversalSpec(
                        name="viewTraversal",
                        type=vim.view.ContainerView,
                        path="view",
                        skip=False,
                    )
                ],
            )
            property_spec = vim.PropertyCollector.PropertySpec(
                type=vim_type, pathSet=["name"], all=False
            )
            filter_spec = vim.PropertyCollector.FilterSpec(
                objectSet=[object_spec], propSet=[property_spec]
            )
            objects = self._retrieve_objects(filter_spec)
        finally:
            view.DestroyView()

        names = {}
        for obj_content in objects:
            props = {p.name: p.val for p in obj_content.propSet or []}
            if "name" in props:
                names[props["name"]] = obj_content.obj
        self._logger.debug(
            f"Found {len(names)} object(s) of type {vim_type.__name__} "
            f"in the {container}"
        )
        return names

    def _retrieve_objects(self, filter_spec) -> list:
        pc = self.property_collector
        result = pc.RetrievePropertiesEx(
            specSet=[filter_spec], options=vim.PropertyCollector.RetrieveOptions()
        )
        if result is None:
            return []

        objects = list(result.objects or [])
        token = result.token
        while token:
            result = pc.ContinueRetrievePropertiesEx(token=token)
            objects.extend(result.objects or [])
            token = result.token
        return objects

    def move_into_folder(self, folder, entities: list):
        self._logger.debug(f"Submitting MoveIntoFolder task for the {folder}")
        return folder.MoveIntoFolder_Task(entities)

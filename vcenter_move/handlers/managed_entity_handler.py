import attr
from pyVmomi import vim


@attr.s(auto_attribs=True)
class ManagedEntityHandler:
    _entity: vim.ManagedEntity

    def __str__(self) -> str:
        return f"Managed Entity '{self.name}'"

    @property
    def entity(self) -> vim.ManagedEntity:
        return self._entity

    @property
    def name(self) -> str:
        return self._entity.name

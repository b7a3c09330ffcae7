'''Binding of the permission evaluator to a session's catalog and principal'''
from typing import Final

from client.authz.permissions import has_permission
from client.errors import AuthorizationDenied

from models.catalog import CapabilityCatalog
from models.permissions import ACTION_CAPABILITIES, SELF_CAPABILITIES, GatedAction
from models.records import Principal

__all__ = ('PermissionGate',)

class PermissionGate:
    '''Decides which gated actions the current principal may perform'''
    __slots__ = ('_catalog', '_principal')

    def __init__(self, catalog: CapabilityCatalog, principal: Principal):
        self._catalog: Final[CapabilityCatalog] = catalog
        self._principal: Final[Principal] = principal

    @property
    def catalog(self) -> CapabilityCatalog:
        return self._catalog
    @property
    def principal(self) -> Principal:
        return self._principal

    def required_bits(self, action: GatedAction, *, on_self: bool = False) -> frozenset[int]:
        names: tuple[str, ...] = ACTION_CAPABILITIES[action]
        if on_self:
            names += SELF_CAPABILITIES.get(action, ())
        return self._catalog.bits_for(*names)

    def allows(self, action: GatedAction, *, on_self: bool = False) -> bool:
        return has_permission(self._principal.granted_bits, self.required_bits(action, on_self=on_self))

    def require(self, action: GatedAction, *, on_self: bool = False) -> None:
        if not self.allows(action, on_self=on_self):
            raise AuthorizationDenied(action)

    def allowed_actions(self) -> frozenset[GatedAction]:
        return frozenset(action for action in GatedAction if self.allows(action))

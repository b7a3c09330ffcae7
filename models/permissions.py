from enum import Enum
from types import MappingProxyType

from models.constants import CATALOG_CONSTANTS

__all__ = ('GatedAction', 'ACTION_CAPABILITIES', 'SELF_CAPABILITIES',)

class GatedAction(Enum):
    ADD_USER                    = 'add_user'
    UPDATE_USER                 = 'update_user'
    DELETE_USER                 = 'delete_user'
    ADD_TRAINING_SESSION        = 'add_training_session'
    UPDATE_TRAINING_SESSION     = 'update_training_session'
    DELETE_TRAINING_SESSION     = 'delete_training_session'

# Administer is listed explicitly for every action, there is no implied hierarchy
ACTION_CAPABILITIES: MappingProxyType[GatedAction, tuple[str, ...]] = MappingProxyType(
    {
        GatedAction.ADD_USER : (CATALOG_CONSTANTS.administer, 'Add User'),
        GatedAction.UPDATE_USER : (CATALOG_CONSTANTS.administer, 'Update Other Users'),
        GatedAction.DELETE_USER : (CATALOG_CONSTANTS.administer, 'Delete Users'),
        GatedAction.ADD_TRAINING_SESSION : (CATALOG_CONSTANTS.administer, 'Add Training Session'),
        GatedAction.UPDATE_TRAINING_SESSION : (CATALOG_CONSTANTS.administer, 'Update Training Sessions'),
        GatedAction.DELETE_TRAINING_SESSION : (CATALOG_CONSTANTS.administer, 'Delete Training Sessions'),
    }
)

# Extra names accepted when the principal acts on its own record
SELF_CAPABILITIES: MappingProxyType[GatedAction, tuple[str, ...]] = MappingProxyType(
    {
        GatedAction.UPDATE_USER : ('Update Self',),
    }
)

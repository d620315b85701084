from slugregistry.dao.base.registry_base_dao import RegistryBaseDAO
from slugregistry.dao.base.ownership_base_dao import OwnershipBaseDAO
from slugregistry.dao.base.payout_base_dao import PayoutBaseDAO


__all__ = [
    'RegistryBaseDAO',
    'OwnershipBaseDAO',
    'PayoutBaseDAO',
]

from slugregistry.dao.memory.registry_memory_dao import RegistryMemoryDAO
from slugregistry.dao.memory.ownership_memory_dao import OwnershipMemoryDAO
from slugregistry.dao.memory.payout_memory_dao import PayoutMemoryDAO


__all__ = [
    'RegistryMemoryDAO',
    'OwnershipMemoryDAO',
    'PayoutMemoryDAO',
]

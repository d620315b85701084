from slugregistry.services.pricing import PricingEngine
from slugregistry.services.fee_ledger import FeeLedger
from slugregistry.services.registry import Registry
from slugregistry.services.renderer import render, token_uri
from slugregistry.services.factory import build_registry


__all__ = [
    'PricingEngine',
    'FeeLedger',
    'Registry',
    'render',
    'token_uri',
    'build_registry',
]

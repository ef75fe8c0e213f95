"""Contract resolution engine.

- DefaultContractResolver: classifies types and assembles contracts
- CamelCaseContractResolver: camelCase member names and dictionary keys
- ContractCache: copy-on-write cache shared or private per resolver

Example:
    from jsoncontract.engine import DefaultContractResolver

    resolver = DefaultContractResolver()
    contract = resolver.resolve_contract(Order)
    for name, prop in contract.properties.items():
        ...
"""

from jsoncontract.engine.cache import SHARED_CONTRACT_CACHE, ContractCache
from jsoncontract.engine.resolver import (
    CamelCaseContractResolver,
    DefaultContractResolver,
    default_resolver,
    to_camel_case,
)

__all__ = [
    "SHARED_CONTRACT_CACHE",
    "CamelCaseContractResolver",
    "ContractCache",
    "DefaultContractResolver",
    "default_resolver",
    "to_camel_case",
]

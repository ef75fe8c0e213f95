"""
jsoncontract: Type-contract resolution for JSON serializers.

Builds and caches, per runtime type, a declarative contract describing how a
serializer constructs, reads and writes instances of that type.
"""

__version__ = "0.1.0"

# core/tools - shared tooling
"""
Shared tooling used by the data layer

Modules:
    - cache: cache path and expiration policy
"""

"""External data source integrations.

Each subdirectory is one data source with a consistent structure:

    datasources/{name}/
    ├── __init__.py       # Public API re-exports
    ├── client.py         # API URLs, constants, pacing, request_json
    └── {feature}.py      # Fetch functions (one per endpoint/concept)

Fetch functions go through ``client.request_json`` so every call is paced and
every failure surfaces as ``inat_rarity.errors.TransportError``. Return
pydantic models (``inat_rarity.schemas``) or small dataclasses, never raw
response dicts.
"""

"""
picopak - package resolution and integrity verification for Pico SDK libraries.

Subpackages:
- schemas: typed records and the error taxonomy
- crypto: sha256 helpers and checksum parsing
- semver: version precedence
- manifest: picopak.json validation and tier content checks
- index: index shapes, resolution, publishing and catalog queries
- http: fetch / download client
- config: per-invocation runtime configuration
"""

__version__ = "0.1.0"

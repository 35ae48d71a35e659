"""Platform implementations for the inventory pipeline.

This package contains self-contained platform modules that provide
source and transformer implementations for each storage backend
(manifest, object storage, local filesystem, fallback bundle).

Each platform module auto-registers itself with the SourceRegistry
when imported.
"""

# Platform modules are imported by SourceRegistry.discover_platforms()

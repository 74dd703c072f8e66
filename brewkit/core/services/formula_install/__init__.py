"""
Formula installation service.

Layered the same way as the rest of the services (data → domain →
detection → execution → orchestration).  Import from the layer
packages directly; this package ``__init__`` stays empty because the
models import the L0 data tables.
"""

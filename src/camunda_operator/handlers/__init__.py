"""Handler modules for CRD resources."""

# Import handlers to register them - all handlers register themselves via @kopf decorators
from . import client  # noqa: F401
from . import cluster  # noqa: F401
from . import provider_config  # noqa: F401

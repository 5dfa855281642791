"""gedcomx_client package exports."""

from .client import GedcomxClient
from .config import (
    EnvConfig,
    authenticate_from_env,
    create_client_from_env,
    load_env_config,
)
from .constants import ATOM_MEDIA_TYPE, GEDCOMX_MEDIA_TYPE, Rel
from .errors import (
    GedcomxApplicationError,
    GedcomxClientError,
    GedcomxConfigurationError,
    GedcomxParseError,
)
from .factory import (
    COLLECTION_KIND,
    FEED_KIND,
    GEDCOMX_KIND,
    JSON_KIND,
    PERSON_KIND,
    SOURCE_DESCRIPTION_KIND,
    StateFactory,
    default_factory,
)
from .links import Link, build_link_table
from .loaders import (
    EntityLoader,
    FeedEntityLoader,
    GedcomxEntityLoader,
    JsonEntityLoader,
    ModelEntityLoader,
)
from .logging import setup_logging
from .options import HeaderParameter, QueryParameter, StateTransitionOption
from .state import ApplicationState

__all__ = [
    # Transport
    "GedcomxClient",
    # States
    "ApplicationState",
    "StateFactory",
    "default_factory",
    "GEDCOMX_KIND",
    "COLLECTION_KIND",
    "PERSON_KIND",
    "SOURCE_DESCRIPTION_KIND",
    "FEED_KIND",
    "JSON_KIND",
    # Links
    "Link",
    "Rel",
    "build_link_table",
    # Entity loaders
    "EntityLoader",
    "JsonEntityLoader",
    "ModelEntityLoader",
    "GedcomxEntityLoader",
    "FeedEntityLoader",
    # Request options
    "StateTransitionOption",
    "HeaderParameter",
    "QueryParameter",
    # Exceptions
    "GedcomxClientError",
    "GedcomxApplicationError",
    "GedcomxConfigurationError",
    "GedcomxParseError",
    # Config / logging
    "EnvConfig",
    "load_env_config",
    "create_client_from_env",
    "authenticate_from_env",
    "setup_logging",
    # Media types
    "GEDCOMX_MEDIA_TYPE",
    "ATOM_MEDIA_TYPE",
]

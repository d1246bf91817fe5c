"""
quick_api
─────────
Stable top-level exports. Import from here, not from sub-modules directly.
Every name exported here is part of the public API and subject to semver.
"""
from quick_api.tier0_core.logging import get_logger
from quick_api.tier0_core.errors import (
    QuickApiError,
    ConfigurationError,
    ResourceDefinitionError,
    ValidationError,
)
from quick_api.tier0_core.config import get_config, QuickApiConfig
from quick_api.tier0_core.http import (
    HTTP,
    Ok,
    NoContent,
    HttpError,
    TransportFailure,
    Result,
)

from quick_api.tier1_runtime.serialize import encode, decode, DecodeError
from quick_api.tier1_runtime.validate import validate_input
from quick_api.tier1_runtime.middleware import ResponseMiddleware, classify

from quick_api.client import Client, CallOptions
from quick_api.resource import OPERATIONS, Resource, ResourceSpec, define_resource

__version__ = "0.1.0"
__all__ = [
    # logging
    "get_logger",
    # errors
    "QuickApiError", "ConfigurationError", "ResourceDefinitionError", "ValidationError",
    # config
    "get_config", "QuickApiConfig",
    # results
    "HTTP", "Ok", "NoContent", "HttpError", "TransportFailure", "Result",
    # serialize
    "encode", "decode", "DecodeError",
    # validate
    "validate_input",
    # middleware
    "ResponseMiddleware", "classify",
    # client
    "Client", "CallOptions",
    # resource
    "OPERATIONS", "Resource", "ResourceSpec", "define_resource",
]

"""sln AWS adapters."""

from ._account import AccountDetails
from ._function import FunctionService
from ._gateway import GatewayService
from ._identity import IdentityService, is_role_arn
from ._interceptors import CallLoggingProxy
from ._object_store import ObjectStoreService
from ._services import AwsServices

__all__ = [
    "AccountDetails",
    "AwsServices",
    "CallLoggingProxy",
    "FunctionService",
    "GatewayService",
    "IdentityService",
    "ObjectStoreService",
    "is_role_arn",
]

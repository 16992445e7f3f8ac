"""REST API provisioning."""

from ._permissions import allow_api_invocation
from ._rebuild import deploy_proxy_api, rebuild_web_api
from ._route_spec import (
    DeployedApi,
    ModuleRouteSpecProvider,
    RouteSpec,
    RouteSpecProvider,
    load_route_spec_provider,
)
from ._url import api_url, execute_api_source_arn, lambda_integration_uri

__all__ = [
    "DeployedApi",
    "ModuleRouteSpecProvider",
    "RouteSpec",
    "RouteSpecProvider",
    "allow_api_invocation",
    "api_url",
    "deploy_proxy_api",
    "execute_api_source_arn",
    "lambda_integration_uri",
    "load_route_spec_provider",
    "rebuild_web_api",
]

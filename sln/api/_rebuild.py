"""Build REST APIs from a route specification."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional, cast

from ..constants import API_STAGE_VERSION_VARIABLE
from ..exceptions import RouteSpecError
from ..reconcile import merge_stage_variables
from ._permissions import allow_api_invocation
from ._url import api_url, lambda_integration_uri

if TYPE_CHECKING:
    from .._logging import ProgressLogger, SlnLogger
    from ..models import OwnerInfo
    from ..providers.aws import FunctionService, GatewayService
    from ._route_spec import RouteSpec

LOGGER = cast("SlnLogger", logging.getLogger(__name__))

SUPPORTED_METHODS = frozenset(
    ["ANY", "DELETE", "GET", "HEAD", "OPTIONS", "PATCH", "POST", "PUT"]
)
PROXY_PATH_PART = "{proxy+}"


def _root_resource_id(resources: List[Dict[str, Any]]) -> str:
    for resource in resources:
        if resource.get("path") == "/":
            return resource["id"]
    raise RouteSpecError("REST API has no root resource")


def _ensure_path(
    gateway: GatewayService, api_id: str, known: Dict[str, str], path: str
) -> str:
    """Create the resources of a path that don't exist yet and return the leaf ID."""
    current = "/"
    for part in [p for p in path.strip("/").split("/") if p]:
        child = f"{current.rstrip('/')}/{part}"
        if child not in known:
            known[child] = gateway.create_resource(api_id, known[current], part)
        current = child
    return known[current]


def _add_method(
    gateway: GatewayService,
    api_id: str,
    resource_id: str,
    http_method: str,
    uri: str,
    **kwargs: Any,
) -> None:
    gateway.put_method(api_id, resource_id, http_method, **kwargs)
    gateway.put_integration(api_id, resource_id, http_method, uri)


def rebuild_web_api(
    gateway: GatewayService,
    function: FunctionService,
    *,
    function_name: str,
    alias: str,
    api_id: str,
    route_spec: RouteSpec,
    owner: OwnerInfo,
    region: str,
    cache_variable: Optional[str] = None,
    progress: Optional[ProgressLogger] = None,
) -> bool:
    """Replace the resource tree of a REST API and deploy it to a stage.

    Every resource below the root is deleted and recreated from
    ``route_spec``. Each method is integrated with the function alias named by
    the ``lambdaVersion`` stage variable.

    Args:
        gateway: API Gateway adapter.
        function: Lambda adapter.
        function_name: Function the API invokes.
        alias: Stage name; also the function alias it invokes.
        api_id: REST API to rebuild.
        route_spec: Routes to create.
        owner: Account the function lives in.
        region: Region of the API and function.
        cache_variable: Stage variable holding the hash of the last deployed
            route specification. When it matches, nothing is rebuilt.
        progress: Stage reporter.

    Returns:
        Whether the API was rebuilt.

    Raises:
        RouteSpecError: A route uses an unsupported HTTP method.

    """
    digest = route_spec.digest()
    stage_variables = gateway.get_stage_variables(api_id, alias)
    if cache_variable and stage_variables.get(cache_variable) == digest:
        LOGGER.info("routes of %s:%s are unchanged; skipping rebuild", api_id, alias)
        return False

    for path, methods in route_spec.routes.items():
        for method in methods:
            if method.upper() not in SUPPORTED_METHODS:
                raise RouteSpecError(f"unsupported method {method} for route /{path}")

    if progress:
        progress.log_stage("rebuilding web api")
    allow_api_invocation(function, function_name, alias, api_id, owner, region)

    resources = gateway.get_resources(api_id)
    root_id = _root_resource_id(resources)
    for resource in resources:
        if resource.get("parentId") == root_id:
            gateway.delete_resource(api_id, resource["id"])
    for resource in resources:
        if resource["id"] == root_id:
            for existing_method in resource.get("resourceMethods") or {}:
                gateway.delete_method(api_id, root_id, existing_method)

    uri = lambda_integration_uri(owner.partition, region, owner.account_id, function_name)
    known = {"/": root_id}
    for path in sorted(route_spec.routes):
        resource_id = _ensure_path(gateway, api_id, known, path)
        for method in sorted(route_spec.routes[path]):
            _add_method(gateway, api_id, resource_id, method.upper(), uri)

    variables = merge_stage_variables(stage_variables, API_STAGE_VERSION_VARIABLE, alias)
    if cache_variable:
        variables = merge_stage_variables(variables, cache_variable, digest)
    gateway.create_deployment(api_id, alias, variables)
    LOGGER.verbose("deployed %s", api_url(api_id, region, alias))
    return True


def deploy_proxy_api(
    gateway: GatewayService,
    function: FunctionService,
    *,
    function_name: str,
    alias: str,
    owner: OwnerInfo,
    region: str,
    progress: Optional[ProgressLogger] = None,
) -> Dict[str, str]:
    """Create a REST API forwarding every path and method to the function.

    Returns:
        ``id`` and ``url`` of the new API.

    """
    if progress:
        progress.log_stage("creating proxy web api")
    api_id = gateway.create_api(function_name)
    root_id = _root_resource_id(gateway.get_resources(api_id))
    proxy_id = gateway.create_resource(api_id, root_id, PROXY_PATH_PART)
    uri = lambda_integration_uri(owner.partition, region, owner.account_id, function_name)
    _add_method(gateway, api_id, root_id, "ANY", uri)
    _add_method(
        gateway,
        api_id,
        proxy_id,
        "ANY",
        uri,
        requestParameters={"method.request.path.proxy": True},
    )
    allow_api_invocation(function, function_name, alias, api_id, owner, region)
    gateway.create_deployment(api_id, alias, {API_STAGE_VERSION_VARIABLE: alias})
    return {"id": api_id, "url": api_url(api_id, region, alias)}

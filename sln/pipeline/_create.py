"""Create a function and everything it needs."""

from __future__ import annotations

import glob
import logging
import shutil
import tempfile
import time
import uuid
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, cast

from botocore.exceptions import ClientError
from pydantic import BaseModel, Field

from ..alias import AliasManager
from ..api import (
    DeployedApi,
    api_url,
    deploy_proxy_api,
    load_route_spec_provider,
    rebuild_web_api,
)
from ..config import ConfigStore, DeploymentConfig, FunctionDefinition, GatewayDefinition
from ..constants import (
    API_PROXY_HANDLER,
    DEFAULT_AWS_DELAY_MS,
    DEFAULT_AWS_RETRIES,
    DEFAULT_CONFIG_FILE,
    DEFAULT_RUNTIME,
    LATEST_ALIAS,
    LATEST_VERSION,
    LOG_POLICY_NAME,
    MEMORY_MAX,
    MEMORY_MIN,
    MEMORY_STEP,
    PROJECT_FILE,
    RECURSION_POLICY_NAME,
    TIMEOUT_MAX,
    TIMEOUT_MIN,
)
from ..env_vars import read_env_vars_from_options
from ..exceptions import PackageError, ValidationError
from ..models import ExecutionRole, FunctionSpec
from ..packager import Packager, PackageOptions, read_project_metadata
from ..policies import lambda_trust_policy, logging_policy, recursive_execution_policy
from ..providers.aws import is_role_arn
from ..retry import is_role_propagation_error, retry
from ..utils import sanitize_iam_name
from ._base import BasePipeline
from ._context import PipelineContext

if TYPE_CHECKING:
    from .._logging import ProgressLogger, SlnLogger
    from ..providers.aws import AwsServices
    from ._base import ServicesFactory

LOGGER = cast("SlnLogger", logging.getLogger(__name__))


class CreateOptions(BaseModel):
    """Options of ``sln create``."""

    region: Optional[str] = None
    handler: Optional[str] = None
    api_module: Optional[str] = None
    deploy_proxy_api: bool = False
    name: Optional[str] = None
    version: Optional[str] = None
    source: Path = Field(default_factory=Path.cwd)
    config: Optional[Path] = None
    policies: Optional[str] = None
    """Glob matching IAM policy documents attached to the role."""

    allow_recursion: bool = False
    role: Optional[str] = None
    """Existing role name or ARN."""

    runtime: str = DEFAULT_RUNTIME
    description: Optional[str] = None
    memory: int = MEMORY_MIN
    timeout: int = 3
    layers: List[str] = Field(default_factory=list)
    use_local_dependencies: bool = False
    pip_options: Optional[str] = None
    cache_api_config: Optional[str] = None
    keep: bool = False
    use_s3_bucket: Optional[str] = None
    s3_key: Optional[str] = None
    s3_sse: Optional[str] = None
    aws_delay: int = DEFAULT_AWS_DELAY_MS
    aws_retries: int = DEFAULT_AWS_RETRIES
    set_env: Optional[str] = None
    set_env_from_json: Optional[str] = None
    env_kms_key_arn: Optional[str] = None

    @property
    def config_path(self) -> Path:
        """Where the deployment descriptor will be written."""
        return self.config or self.source / DEFAULT_CONFIG_FILE

    @property
    def handler_name(self) -> str:
        """Handler the function is created with."""
        if self.handler:
            return self.handler
        return f"{self.api_module}.{API_PROXY_HANDLER}"

    def env_options(self) -> Dict[str, Optional[str]]:
        """Environment variable options that were supplied."""
        return {"set_env": self.set_env, "set_env_from_json": self.set_env_from_json}

    def policy_files(self) -> List[Path]:
        """Files named by ``--policies``: every file of a directory, or a glob's matches."""
        if not self.policies:
            return []
        if Path(self.policies).is_dir():
            return sorted(path for path in Path(self.policies).iterdir() if path.is_file())
        return [Path(match) for match in sorted(glob.glob(self.policies)) if Path(match).is_file()]

    def validate_options(self) -> None:  # noqa: C901
        """Reject unusable option combinations.

        Raises:
            ValidationError: The first problem found.

        """
        if not self.region:
            raise ValidationError("AWS region is missing; specify it with --region")
        if not self.handler and not self.api_module:
            raise ValidationError(
                "both --api-module and --handler are missing; specify one of them"
            )
        if self.handler and self.api_module:
            raise ValidationError(
                "incompatible arguments; cannot specify --handler and --api-module together"
            )
        if self.deploy_proxy_api and not self.handler:
            raise ValidationError("--deploy-proxy-api requires --handler")
        if self.handler and "." not in self.handler:
            raise ValidationError(
                "handler function not specified; use --handler module.function"
            )
        if self.api_module and "." in self.api_module:
            raise ValidationError(
                "--api-module must be a module name, without the file extension or function name"
            )
        if not self.source.is_dir():
            raise ValidationError(f"source directory {self.source} does not exist")
        if not self.config_path.parent.is_dir():
            raise ValidationError(f"cannot write to {self.config_path}")
        if self.config_path.exists():
            raise ValidationError(
                f"{self.config_path} already exists; use sln set-version to update the function"
            )
        if not self.name and not (self.source / PROJECT_FILE).is_file():
            raise ValidationError(
                f"{PROJECT_FILE} does not exist in {self.source}; create one or use --name"
            )
        if self.policies and not self.policy_files():
            raise ValidationError(f"no files match {self.policies}")
        if self.memory < MEMORY_MIN:
            raise ValidationError(
                f"--memory must be greater than or equal to {MEMORY_MIN}"
            )
        if self.memory > MEMORY_MAX:
            raise ValidationError(f"--memory must be less than or equal to {MEMORY_MAX}")
        if self.memory % MEMORY_STEP:
            raise ValidationError(f"--memory must be a multiple of {MEMORY_STEP}")
        if not TIMEOUT_MIN <= self.timeout <= TIMEOUT_MAX:
            raise ValidationError(
                f"--timeout must be between {TIMEOUT_MIN} and {TIMEOUT_MAX} seconds"
            )
        if self.allow_recursion and self.role and is_role_arn(self.role):
            raise ValidationError(
                "incompatible arguments --allow-recursion and --role; "
                "recursive execution can't be granted to a role referenced by ARN"
            )
        if self.s3_key and not self.use_s3_bucket:
            raise ValidationError("--s3-key requires --use-s3-bucket")
        if self.s3_sse and not self.use_s3_bucket:
            raise ValidationError("--s3-sse requires --use-s3-bucket")
        read_env_vars_from_options(self.env_options())


class CreatePipeline(BasePipeline):
    """Package a project and deploy it as a new function.

    Stages run strictly in order; the first failure stops the run and is
    raised as :class:`~sln.exceptions.PipelineStageError`. The staging
    directory is removed whatever the outcome.

    """

    def __init__(
        self,
        options: CreateOptions,
        get_services: ServicesFactory,
        *,
        packager: Optional[Packager] = None,
        progress: Optional[ProgressLogger] = None,
        sleep: Callable[[float], Any] = time.sleep,
    ) -> None:
        """Instantiate class.

        Args:
            options: Validated when the pipeline runs.
            get_services: Builds the AWS adapters for the target region.
            packager: Builds the archive.
            progress: Stage reporter.
            sleep: Used between function creation attempts.

        """
        super().__init__(get_services, progress)
        self.options = options
        self.packager = packager or Packager()
        self.sleep = sleep
        self._services: Optional[AwsServices] = None

    @property
    def services(self) -> AwsServices:
        """AWS adapters for the target region."""
        if not self._services:
            self._services = self.get_services(cast(str, self.options.region))
        return self._services

    def run(self) -> Dict[str, Any]:
        """Run the pipeline.

        Returns:
            The saved deployment descriptor plus API URL and kept archive.

        """
        self.options.validate_options()
        ctx = PipelineContext()
        try:
            with self.stage("packaging"):
                self.resolve_package(ctx)
            with self.stage("acquiring execution role"):
                self.acquire_role(ctx)
            with self.stage("creating function"):
                self.create_function(ctx)
            with self.stage("binding aliases"):
                self.bind_aliases(ctx)
            if self.options.api_module or self.options.deploy_proxy_api:
                with self.stage("exposing web api"):
                    self.expose_api(ctx)
            with self.stage("saving deployment config"):
                config = self.persist(ctx)
            return self.result(ctx, config)
        finally:
            self.cleanup(ctx)

    def _load_owner(self, ctx: PipelineContext) -> None:
        if ctx.owner_account_id:
            return
        owner = self.services.account.owner
        ctx.owner_account_id = owner.account_id
        ctx.partition = owner.partition

    def resolve_package(self, ctx: PipelineContext) -> None:
        """Read project metadata and build the archive in a fresh staging directory."""
        metadata = read_project_metadata(self.options.source)
        ctx.function_name = self.options.name or metadata.name
        if not ctx.function_name:
            raise PackageError(f"project name missing from {PROJECT_FILE}; use --name")
        ctx.function_description = self.options.description or metadata.description
        ctx.staging_dir = Path(tempfile.mkdtemp(prefix="sln-"))
        ctx.artifact_path = self.packager.build(
            self.options.source,
            ctx.staging_dir,
            PackageOptions(
                handler=self.options.handler,
                api_module=self.options.api_module,
                name=ctx.function_name,
                use_local_dependencies=self.options.use_local_dependencies,
                pip_options=self.options.pip_options,
            ),
        )
        ctx.package_dir = ctx.staging_dir / "package"

    def acquire_role(self, ctx: PipelineContext) -> None:
        """Reference or create the execution role and attach its policies."""
        identity = self.services.identity
        function_name = cast(str, ctx.function_name)
        role = self.options.role
        if role and is_role_arn(role):
            ctx.role = ExecutionRole(name=role.rsplit("/", 1)[-1], arn=role, created=False)
        elif role:
            ctx.role = identity.get_role(role)
            self._load_owner(ctx)
            try:
                identity.put_inline_policy(
                    ctx.role.name, LOG_POLICY_NAME, logging_policy(cast(str, ctx.partition))
                )
            except ClientError as exc:
                self.progress.warning(
                    "unable to attach %s policy to %s: %s", LOG_POLICY_NAME, ctx.role.name, exc
                )
        else:
            self._load_owner(ctx)
            ctx.role = identity.create_role(f"{function_name}-role", lambda_trust_policy())
            identity.put_inline_policy(
                ctx.role.name, LOG_POLICY_NAME, logging_policy(cast(str, ctx.partition))
            )
        for policy_file in self.options.policy_files():
            identity.put_inline_policy(
                ctx.role.name, sanitize_iam_name(policy_file.stem), policy_file.read_text()
            )
        if self.options.allow_recursion:
            self._load_owner(ctx)
            identity.put_inline_policy(
                ctx.role.name,
                RECURSION_POLICY_NAME,
                recursive_execution_policy(
                    cast(str, ctx.partition),
                    cast(str, self.options.region),
                    cast(str, ctx.owner_account_id),
                    function_name,
                ),
            )

    def create_function(self, ctx: PipelineContext) -> None:
        """Upload the archive if requested and create the function.

        Creation is retried while Lambda still rejects a freshly created role.

        """
        env = read_env_vars_from_options(self.options.env_options())
        ctx.env_vars = env[1] if env else {}
        artifact = cast(Path, ctx.artifact_path)
        if self.options.use_s3_bucket:
            ctx.storage_key = self.options.s3_key or f"{uuid.uuid4()}.zip"
            code: Dict[str, Any] = self.services.object_store.upload_artifact(
                self.options.use_s3_bucket, ctx.storage_key, artifact, self.options.s3_sse
            )
        else:
            code = {"ZipFile": artifact.read_bytes()}
        spec = FunctionSpec(
            name=cast(str, ctx.function_name),
            role_arn=cast(ExecutionRole, ctx.role).arn,
            handler=self.options.handler_name,
            runtime=self.options.runtime,
            code=code,
            description=ctx.function_description,
            memory=self.options.memory,
            timeout=self.options.timeout,
            env_vars=ctx.env_vars or None,
            kms_key_arn=self.options.env_kms_key_arn,
            layers=self.options.layers,
        )
        resource = retry(
            lambda: self.services.function.create(spec),
            self.options.aws_delay,
            self.options.aws_retries,
            is_role_propagation_error,
            on_retry=lambda: self.progress.log_stage("waiting for IAM role propagation"),
            sleep=self.sleep,
        )
        ctx.function_arn = resource.arn
        ctx.function_version = resource.version

    def bind_aliases(self, ctx: PipelineContext) -> None:
        """Point ``latest`` at ``$LATEST`` and the ``--version`` label at the new version."""
        manager = AliasManager(self.services.function)
        function_name = cast(str, ctx.function_name)
        manager.ensure_alias(function_name, LATEST_VERSION, LATEST_ALIAS)
        if self.options.version:
            manager.ensure_alias(
                function_name, cast(str, ctx.function_version), self.options.version
            )

    def expose_api(self, ctx: PipelineContext) -> None:
        """Create the REST API requested by ``--api-module`` or ``--deploy-proxy-api``."""
        services = self.services
        owner = services.account.owner
        region = cast(str, self.options.region)
        function_name = cast(str, ctx.function_name)
        alias = self.options.version or LATEST_ALIAS
        if self.options.deploy_proxy_api:
            ctx.api = deploy_proxy_api(
                services.gateway,
                services.function,
                function_name=function_name,
                alias=alias,
                owner=owner,
                region=region,
                progress=self.progress,
            )
            return
        api_module = cast(str, self.options.api_module)
        provider = load_route_spec_provider(cast(Path, ctx.package_dir), api_module)
        route_spec = provider.get_config()
        api_id = services.gateway.create_api(function_name)
        rebuild_web_api(
            services.gateway,
            services.function,
            function_name=function_name,
            alias=alias,
            api_id=api_id,
            route_spec=route_spec,
            owner=owner,
            region=region,
            cache_variable=self.options.cache_api_config,
            progress=self.progress,
        )
        ctx.api = {"id": api_id, "module": api_module, "url": api_url(api_id, region, alias)}
        deployed = DeployedApi(
            name=function_name, alias=alias, api_id=api_id, api_url=ctx.api["url"], region=region
        )
        deploy_result = provider.post_deploy(
            self.options.model_dump(),
            deployed,
            {"function": services.function, "gateway": services.gateway},
        )
        if deploy_result is not None:
            ctx.api["deploy"] = deploy_result

    def persist(self, ctx: PipelineContext) -> DeploymentConfig:
        """Save the deployment descriptor."""
        role = cast(ExecutionRole, ctx.role)
        config = DeploymentConfig(
            function=FunctionDefinition(
                name=cast(str, ctx.function_name),
                region=cast(str, self.options.region),
                role=role.name,
                shared_role=None if role.created else True,
            ),
            gateway=(
                GatewayDefinition(id=ctx.api["id"], module=self.options.api_module)
                if ctx.api
                else None
            ),
            storage_key=ctx.storage_key,
        )
        ConfigStore(self.options.config_path).save(config)
        return config

    def result(self, ctx: PipelineContext, config: DeploymentConfig) -> Dict[str, Any]:
        """Build what ``sln create`` prints."""
        result = config.model_dump(by_alias=True, exclude_none=True)
        if ctx.api:
            result["api"].update({k: v for k, v in ctx.api.items() if k != "id"})
        if self.options.keep and ctx.artifact_path:
            result["archive"] = str(ctx.artifact_path)
        return result

    def cleanup(self, ctx: PipelineContext) -> None:
        """Remove the staging directory; with ``--keep`` only the archive survives."""
        if not ctx.staging_dir:
            return
        if self.options.keep and ctx.artifact_path and ctx.artifact_path.exists():
            if ctx.package_dir:
                shutil.rmtree(ctx.package_dir, ignore_errors=True)
            LOGGER.info("archive kept at %s", ctx.artifact_path)
            return
        shutil.rmtree(ctx.staging_dir, ignore_errors=True)
        LOGGER.debug("removed %s", ctx.staging_dir)

"""API Gateway URLs and ARNs."""

from __future__ import annotations

from ..constants import API_STAGE_VERSION_VARIABLE


def api_url(api_id: str, region: str, stage: str) -> str:
    """Invoke URL of a deployed REST API stage."""
    return f"https://{api_id}.execute-api.{region}.amazonaws.com/{stage}"


def execute_api_source_arn(partition: str, region: str, account_id: str, api_id: str) -> str:
    """Source ARN matching every method of every stage of a REST API."""
    return f"arn:{partition}:execute-api:{region}:{account_id}:{api_id}/*/*/*"


def lambda_integration_uri(
    partition: str, region: str, account_id: str, function_name: str
) -> str:
    """Integration URI invoking the function alias named by the stage variable."""
    function_arn = (
        f"arn:{partition}:lambda:{region}:{account_id}:function:{function_name}"
        f":${{stageVariables.{API_STAGE_VERSION_VARIABLE}}}"
    )
    return (
        f"arn:{partition}:apigateway:{region}:lambda:path/2015-03-31/functions/"
        f"{function_arn}/invocations"
    )

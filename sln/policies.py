"""IAM policy documents attached by sln."""

from __future__ import annotations

import awacs.awslambda
import awacs.logs
import awacs.s3
from awacs.aws import Allow, Policy, Statement
from awacs.helpers.trust import get_lambda_assumerole_policy


def lambda_trust_policy() -> str:
    """Trust policy allowing Lambda to assume the execution role."""
    return get_lambda_assumerole_policy().to_json()


def logging_policy(partition: str) -> str:
    """Allow the function to write to CloudWatch Logs."""
    return Policy(
        Version="2012-10-17",
        Statement=[
            Statement(
                Effect=Allow,
                Action=[
                    awacs.logs.CreateLogGroup,
                    awacs.logs.CreateLogStream,
                    awacs.logs.PutLogEvents,
                ],
                Resource=[f"arn:{partition}:logs:*:*:*"],
            )
        ],
    ).to_json()


def recursive_execution_policy(
    partition: str, region: str, account_id: str, function_name: str
) -> str:
    """Allow the function to invoke itself."""
    return Policy(
        Version="2012-10-17",
        Statement=[
            Statement(
                Effect=Allow,
                Action=[awacs.awslambda.InvokeFunction],
                Resource=[
                    f"arn:{partition}:lambda:{region}:{account_id}:function:{function_name}"
                ],
            )
        ],
    ).to_json()


def s3_access_policy(partition: str, bucket: str) -> str:
    """Allow the function full access to objects in a bucket."""
    return Policy(
        Version="2012-10-17",
        Statement=[
            Statement(
                Effect=Allow,
                Action=[awacs.s3.Action("*")],
                Resource=[f"arn:{partition}:s3:::{bucket}/*"],
            )
        ],
    ).to_json()

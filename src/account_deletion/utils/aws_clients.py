from dataclasses import dataclass
from typing import Any

import boto3


@dataclass(frozen=True)
class AwsClients:
    cognito: Any
    dynamodb: Any
    lambda_: Any


def create_aws_clients(region: str) -> AwsClients:
    """Factory to create the boto3 clients the service talks to."""
    session = boto3.Session(region_name=region)
    return AwsClients(
        cognito=session.client("cognito-idp"),
        dynamodb=session.client("dynamodb"),
        lambda_=session.client("lambda"),
    )

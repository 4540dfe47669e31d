#!/usr/bin/env python3
"""
CDK application: DynamoDB tables plus the Lambda-backed catalog API.
"""
import os

import aws_cdk as cdk
from stacks.api_stack import ApiStack
from stacks.storage_stack import StorageStack


def context_or_env(app: cdk.App, key: str, env_name: str, default: str = None) -> str:
    return app.node.try_get_context(key) or os.environ.get(env_name, default)


app = cdk.App()

deployment_env = context_or_env(app, "environment", "ENVIRONMENT", "prod")
aws_env = cdk.Environment(
    account=context_or_env(app, "account", "CDK_DEFAULT_ACCOUNT"),
    region=context_or_env(app, "region", "CDK_DEFAULT_REGION", "us-east-1"),
)
prefix = f"RomanceCatalog-{deployment_env.title()}"

storage = StorageStack(app, f"{prefix}-Storage", deployment_env=deployment_env, env=aws_env)
ApiStack(app, f"{prefix}-Api", storage_stack=storage, deployment_env=deployment_env, env=aws_env)

for key, value in {"Project": "RomanceCatalog", "Environment": deployment_env}.items():
    cdk.Tags.of(app).add(key, value)

app.synth()

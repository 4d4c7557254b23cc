#!/usr/bin/env python3
"""CDK app for the Instance Lifecycle Cleanup Lambda."""

import os
import aws_cdk as cdk
from stacks.instance_cleanup_stack import InstanceCleanupStack

app = cdk.App()

InstanceCleanupStack(
    app,
    "InstanceLifecycleCleanupStack",
    description="Stops idle tagged EC2 instances and terminates long-stopped ones",
    env=cdk.Environment(
        account=os.getenv('CDK_DEFAULT_ACCOUNT'),
        region=os.getenv('CDK_DEFAULT_REGION', 'us-west-2')
    ),
    tags={
        "Project": "PlatformEngineering",
        "ManagedBy": "CDK",
    }
)

app.synth()

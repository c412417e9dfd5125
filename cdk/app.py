#!/usr/bin/env python3
import os
from pathlib import Path

import aws_cdk as cdk

from marble_cdk.context_env import ContextEnv
from marble_cdk.context_helpers import get_required_context
from marble_cdk.pipelines import instantiate_pipeline_stacks
from marble_cdk.stacks import instantiate_service_stacks

# Load environment variables from .env file if it exists
env_file = Path(__file__).parent / ".env"
if env_file.exists():
    with open(env_file) as f:
        for line in f:
            line = line.strip()
            if line and not line.startswith("#") and "=" in line:
                key, value = line.split("=", 1)
                # Only set if not already in environment (allow override)
                if key.strip() and not os.getenv(key.strip()):
                    os.environ[key.strip()] = value.strip()

app = cdk.App()

namespace = get_required_context(app.node, "namespace")
context_env = ContextEnv.from_context(app.node, get_required_context(app.node, "contextEnvName"))

# "service" deploys one namespace's stacks; "pipeline" adds the pipelines promoting test to prod
deploy_type = app.node.try_get_context("deployType") or "service"

if deploy_type == "pipeline":
    test_stacks = instantiate_service_stacks(app, f"{namespace}-test", context_env)
    prod_stacks = instantiate_service_stacks(app, f"{namespace}-prod", context_env)
    instantiate_pipeline_stacks(app, namespace, context_env, test_stacks, prod_stacks)
elif deploy_type == "service":
    instantiate_service_stacks(app, namespace, context_env)
else:
    raise ValueError(f"Unknown deployType '{deploy_type}', expected 'service' or 'pipeline'")

app.synth()

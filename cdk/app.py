#!/usr/bin/env python3
import os
from pathlib import Path

import aws_cdk as cdk

from goals_stack.goals_stack import GoalsStack
from goals_stack.helpers import NameAllocator, get_region, get_region_abbrev, load_env_file, load_stack_config

# Load environment variables from .env file if it exists
load_env_file(Path(__file__).parent / ".env")

app = cdk.App()

# Get environment from context or environment variable (dev/prod)
env_name = app.node.try_get_context("environment") or os.getenv("ENVIRONMENT", "dev")

region = get_region()
region_abbrev = get_region_abbrev(region)

env = cdk.Environment(
    account=os.getenv("AWS_ACCOUNT_ID") or os.getenv("CDK_DEFAULT_ACCOUNT"),
    region=region,
)

config = load_stack_config(app, base_dir=Path(__file__).resolve().parent)

# Pass -c name_seed=<value> to reproduce the bucket names of an earlier synth
allocator = NameAllocator(config.bucket_prefix, seed=app.node.try_get_context("name_seed"))

GoalsStack(
    app,
    f"GoalsStack-{region_abbrev}-{env_name}",
    config=config,
    allocator=allocator,
    env=env,
    description=f"{config.project_name} - Full stack goals application ({region_abbrev}-{env_name})",
)

app.synth()

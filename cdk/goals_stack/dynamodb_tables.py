from typing import Callable

from aws_cdk import RemovalPolicy
from aws_cdk import aws_dynamodb as ddb
from constructs import Construct


def create_goals_table(stack: Construct, rn: Callable[[str], str], table_name: str) -> ddb.Table:
    """Create the goals table keyed by (userId, goalId).

    Args:
        stack: CDK Construct (usually the Stack instance)
        rn: helper function to create resource names (rn(name: str) -> str)
        table_name: Base table name, prefixed by rn

    Returns:
        The goals Table construct
    """
    # Key names cannot change once the table exists
    return ddb.Table(
        stack,
        "TGoals",
        table_name=rn(table_name),
        partition_key=ddb.Attribute(name="userId", type=ddb.AttributeType.STRING),
        sort_key=ddb.Attribute(name="goalId", type=ddb.AttributeType.STRING),
        billing_mode=ddb.BillingMode.PROVISIONED,
        read_capacity=1,
        write_capacity=1,
        removal_policy=RemovalPolicy.DESTROY,
    )

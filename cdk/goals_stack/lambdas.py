"""Lambda function definitions for the goals stack.

This module creates the five goal functions (list, create, delete, update,
get). Handler code is deployed from a single directory and is not part of
this application.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Iterator

from aws_cdk import Duration
from aws_cdk import aws_iam as iam
from aws_cdk import aws_lambda as lambda_
from constructs import Construct

if TYPE_CHECKING:
    from aws_cdk import aws_dynamodb as dynamodb

RUNTIME = lambda_.Runtime.NODEJS_20_X
MEMORY_SIZE_MB = 256
TIMEOUT_SECONDS = 120


@dataclass(frozen=True)
class GoalFunctionSpec:
    key: str
    name: str
    description: str
    # GetGoal is deployed without the shared table role; see DESIGN.md
    uses_shared_role: bool = True

    @property
    def handler(self) -> str:
        return f"{self.name}.handler"


GOAL_FUNCTION_SPECS = (
    GoalFunctionSpec("list", "ListGoals", "Get list of goals for userId"),
    GoalFunctionSpec("create", "CreateGoal", "Create goal for user id"),
    GoalFunctionSpec("delete", "DeleteGoal", "Delete goal for user id"),
    GoalFunctionSpec("update", "UpdateGoal", "Update goal for user id"),
    GoalFunctionSpec("get", "GetGoal", "Get goal for user id", uses_shared_role=False),
)


@dataclass(frozen=True)
class GoalFunctions:
    list: lambda_.Function
    create: lambda_.Function
    delete: lambda_.Function
    update: lambda_.Function
    get: lambda_.Function

    def __iter__(self) -> Iterator[lambda_.Function]:
        return iter((self.list, self.create, self.delete, self.update, self.get))


def create_goal_functions(
    scope: Construct,
    rn: Callable[[str], str],
    table_access_role: iam.IRole,
    table: "dynamodb.Table",
    functions_dir: str,
) -> GoalFunctions:
    """Create all goal Lambda functions.

    Args:
        scope: CDK construct scope
        rn: Resource naming function (name -> formatted name)
        table_access_role: Shared execution role with table access
        table: Goals DynamoDB table
        functions_dir: Directory holding the handler code

    Returns:
        GoalFunctions record keyed by operation
    """
    code = lambda_.Code.from_asset(functions_dir)
    lambda_env = {"TABLE_NAME": table.table_name}

    functions: dict[str, lambda_.Function] = {}
    for spec in GOAL_FUNCTION_SPECS:
        fn = lambda_.Function(
            scope,
            f"Function{spec.name}",
            function_name=rn(spec.name),
            runtime=RUNTIME,
            description=spec.description,
            handler=spec.handler,
            memory_size=MEMORY_SIZE_MB,
            timeout=Duration.seconds(TIMEOUT_SECONDS),
            role=table_access_role if spec.uses_shared_role else None,
            environment=lambda_env,
            code=code,
        )
        table.grant_read_write_data(fn)
        functions[spec.key] = fn

    return GoalFunctions(**functions)

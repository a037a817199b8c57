"""API Gateway REST API for the goals stack.

Routes:
- ANY /                      mock integration
- GET, POST /goals           ListGoals, CreateGoal
- GET, PUT, DELETE /goals/{id} GetGoal, UpdateGoal, DeleteGoal
- OPTIONS on both goal resources answers CORS preflight without a function
"""

from dataclasses import dataclass
from typing import Optional

from aws_cdk import Aws
from aws_cdk import aws_apigateway as apigw
from aws_cdk import aws_cognito as cognito
from aws_cdk import aws_lambda as lambda_
from constructs import Construct

from goals_stack.lambdas import GoalFunctions
from goals_stack.logging import StructuredLogger

AUTHORIZATION_HEADER_SOURCE = "method.request.header.Authorization"

CORS_ALLOW_HEADERS = "Content-Type,X-Amz-Date,Authorization,X-Api-Key,X-Amz-Security-Token,X-Amz-User-Agent"
CORS_ALLOW_METHODS = "OPTIONS,GET,PUT,POST,DELETE"

# Header values are API Gateway literals, hence the inner quotes
CORS_RESPONSE_HEADERS = {
    "method.response.header.Access-Control-Allow-Headers": f"'{CORS_ALLOW_HEADERS}'",
    "method.response.header.Access-Control-Allow-Origin": "'*'",
    "method.response.header.Access-Control-Allow-Credentials": "'false'",
    "method.response.header.Access-Control-Allow-Methods": f"'{CORS_ALLOW_METHODS}'",
}


@dataclass(frozen=True)
class GoalsApi:
    rest_api: apigw.RestApi
    authorizer: apigw.CognitoUserPoolsAuthorizer
    goals: apigw.Resource
    goal: apigw.Resource

    @property
    def base_url(self) -> str:
        """Stage URL without the trailing slash."""
        return (
            f"https://{self.rest_api.rest_api_id}.execute-api.{Aws.REGION}.{Aws.URL_SUFFIX}"
            f"/{self.rest_api.deployment_stage.stage_name}"
        )


def add_method(
    resource: apigw.IResource,
    http_method: str,
    target_function: lambda_.IFunction,
    authorizer: Optional[apigw.IAuthorizer] = None,
) -> apigw.Method:
    """Route one HTTP method on a resource to a Lambda function.

    With an authorizer the method requires a valid user pool token.
    """
    if authorizer is None:
        return resource.add_method(http_method, apigw.LambdaIntegration(target_function))
    return resource.add_method(
        http_method,
        apigw.LambdaIntegration(target_function),
        authorization_type=apigw.AuthorizationType.COGNITO,
        authorizer=authorizer,
    )


def add_cors_options(resource: apigw.IResource, logger: Optional[StructuredLogger] = None) -> apigw.Method:
    """Attach an OPTIONS method that answers 200 with fixed CORS headers.

    The integration is a mock, so no function is invoked. A second call on the
    same resource returns the existing method, since construct IDs must be unique.
    """
    existing = resource.node.try_find_child("OPTIONS")
    if existing is not None:
        if logger:
            logger.warning("CORS preflight already registered", path=resource.path)
        return existing  # type: ignore[return-value]

    return resource.add_method(
        "OPTIONS",
        apigw.MockIntegration(
            integration_responses=[
                apigw.IntegrationResponse(
                    status_code="200",
                    response_parameters=CORS_RESPONSE_HEADERS,
                )
            ],
            passthrough_behavior=apigw.PassthroughBehavior.NEVER,
            request_templates={"application/json": '{"statusCode": 200}'},
        ),
        method_responses=[
            apigw.MethodResponse(
                status_code="200",
                response_parameters={header: True for header in CORS_RESPONSE_HEADERS},
            )
        ],
    )


def create_goals_api(
    scope: Construct,
    project_name: str,
    user_pool: cognito.IUserPool,
    functions: GoalFunctions,
    logger: Optional[StructuredLogger] = None,
) -> GoalsApi:
    """Create the REST API and wire every goal route to its function.

    Args:
        scope: CDK construct scope
        project_name: REST API name
        user_pool: User pool backing the authorizer
        functions: Goal functions to integrate
        logger: Optional logger for registration events

    Returns:
        GoalsApi record
    """
    rest_api = apigw.RestApi(scope, "AppApi", rest_api_name=project_name)
    # The stack publishes only the website and CDN URLs
    rest_api.node.try_remove_child("Endpoint")

    authorizer = apigw.CognitoUserPoolsAuthorizer(
        scope,
        "ApiAuthorizer",
        authorizer_name="ApiAuthorizer",
        cognito_user_pools=[user_pool],
        identity_source=AUTHORIZATION_HEADER_SOURCE,
    )

    rest_api.root.add_method("ANY")

    goals = rest_api.root.add_resource("goals")
    add_method(goals, "GET", functions.list, authorizer)
    add_method(goals, "POST", functions.create, authorizer)
    add_cors_options(goals, logger)

    goal = goals.add_resource("{id}")
    add_method(goal, "GET", functions.get, authorizer)
    add_method(goal, "PUT", functions.update, authorizer)
    add_method(goal, "DELETE", functions.delete, authorizer)
    add_cors_options(goal, logger)

    return GoalsApi(rest_api=rest_api, authorizer=authorizer, goals=goals, goal=goal)

"""
IAM roles and policies for the CDK stack.

Creates:
- Table access role shared by the goal functions
- Cognito SMS role for user pool messages
- Federated roles for authenticated and unauthenticated identities
- CodeBuild and CodePipeline service roles
"""

from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional, Sequence

from aws_cdk import aws_dynamodb as dynamodb
from aws_cdk import aws_iam as iam
from constructs import Construct

COGNITO_IDENTITY_PRINCIPAL = "cognito-identity.amazonaws.com"
COGNITO_IDP_PRINCIPAL = "cognito-idp.amazonaws.com"

# Cognito presents this ID when assuming the SMS role
COGNITO_SMS_EXTERNAL_ID = "goals-cognito-sms"

# Anonymous telemetry, granted to every identity
TELEMETRY_ACTIONS = ["mobileanalytics:PutEvents", "cognito-sync:*"]
AUTHENTICATED_ACTIONS = TELEMETRY_ACTIONS + ["cognito-identity:*"]
API_INVOKE_ACTIONS = ["execute-api:Invoke"]

BUILD_LOG_ACTIONS = [
    "logs:CreateLogStream",
    "logs:PutLogEvents",
    "logs:CreateLogGroup",
    "cloudfront:CreateInvalidation",
]
PIPELINE_BUILD_ACTIONS = ["codebuild:BatchGetBuilds", "codebuild:StartBuild"]


@dataclass(frozen=True)
class FederatedRoles:
    authenticated: iam.Role
    unauthenticated: iam.Role


def allow(actions: Iterable[str], resources: Iterable[str]) -> iam.PolicyStatement:
    """Build an ALLOW statement."""
    return iam.PolicyStatement(
        effect=iam.Effect.ALLOW,
        actions=list(actions),
        resources=list(resources),
    )


def create_service_role(
    scope: Construct,
    construct_id: str,
    service: str,
    role_name: Optional[str] = None,
    conditions: Optional[dict[str, Any]] = None,
) -> iam.Role:
    """Create a role trusted by a single AWS service principal.

    conditions, when given, are added to the trust policy statement.
    """
    return iam.Role(
        scope,
        construct_id,
        role_name=role_name,
        assumed_by=iam.ServicePrincipal(service, conditions=conditions),
    )


def create_federated_role(scope: Construct, construct_id: str, identity_pool_id: str, amr: str) -> iam.Role:
    """Create a role assumable by identity pool users in the given authentication state.

    Args:
        scope: CDK construct scope
        construct_id: Construct ID of the role
        identity_pool_id: Identity pool the web identity token must be issued for
        amr: 'authenticated' or 'unauthenticated'
    """
    return iam.Role(
        scope,
        construct_id,
        assumed_by=iam.FederatedPrincipal(
            COGNITO_IDENTITY_PRINCIPAL,
            conditions={
                "StringEquals": {f"{COGNITO_IDENTITY_PRINCIPAL}:aud": identity_pool_id},
                "ForAnyValue:StringLike": {f"{COGNITO_IDENTITY_PRINCIPAL}:amr": amr},
            },
            assume_role_action="sts:AssumeRoleWithWebIdentity",
        ),
    )


def attach_policy(
    scope: Construct,
    construct_id: str,
    role: iam.IRole,
    statements: Sequence[iam.PolicyStatement],
    policy_name: Optional[str] = None,
) -> iam.Policy:
    """Attach a named policy to exactly one role.

    Attaching several policies to the same role is additive.
    """
    return iam.Policy(
        scope,
        construct_id,
        policy_name=policy_name or construct_id,
        roles=[role],
        statements=list(statements),
    )


def create_table_access_role(scope: Construct, table: dynamodb.ITable) -> iam.Role:
    """Create the Lambda role with full access to the goals table."""
    role = create_service_role(scope, "DynamoDbRole", "lambda.amazonaws.com")
    attach_policy(scope, "GoalsPolicy", role, [allow(["dynamodb:*"], [table.table_arn])])
    return role


def create_cognito_sns_role(scope: Construct, external_id: str = COGNITO_SMS_EXTERNAL_ID) -> iam.Role:
    """Create the role Cognito uses to publish SMS messages.

    Only callers presenting external_id may assume it; the user pool must be
    configured with the same value.
    """
    role = create_service_role(
        scope,
        "SnsRole",
        COGNITO_IDP_PRINCIPAL,
        conditions={"StringEquals": {"sts:ExternalId": external_id}},
    )
    attach_policy(scope, "CognitoSnsPolicy", role, [allow(["sns:publish"], ["*"])])
    return role


def unauthenticated_statements() -> list[iam.PolicyStatement]:
    return [allow(TELEMETRY_ACTIONS, ["*"])]


def authenticated_statements() -> list[iam.PolicyStatement]:
    return [
        allow(AUTHENTICATED_ACTIONS, ["*"]),
        allow(API_INVOKE_ACTIONS, ["*"]),
    ]


def create_identity_pool_roles(scope: Construct, identity_pool_id: str) -> FederatedRoles:
    """Create the unauthenticated and authenticated identity pool roles with their policies."""
    unauthenticated_role = create_federated_role(scope, "CognitoUnAuthorizedRole", identity_pool_id, "unauthenticated")
    attach_policy(scope, "CognitoUnauthorizedPolicy", unauthenticated_role, unauthenticated_statements())

    authenticated_role = create_federated_role(scope, "CognitoAuthorizedRole", identity_pool_id, "authenticated")
    attach_policy(scope, "CognitoAuthorizedPolicy", authenticated_role, authenticated_statements())

    return FederatedRoles(authenticated=authenticated_role, unauthenticated=unauthenticated_role)


def create_build_role(scope: Construct, rn: Callable[[str], str], bucket_arns: Sequence[str]) -> iam.Role:
    """Create the CodeBuild service role.

    Args:
        scope: CDK construct scope
        rn: helper function to create resource names
        bucket_arns: Bucket and object ARNs the build may read and write

    Returns:
        The CodeBuild role
    """
    role = create_service_role(scope, "CodeBuildRole", "codebuild.amazonaws.com", role_name=rn("CodeBuildRole"))
    role.add_to_policy(allow(["s3:*"], bucket_arns))
    role.add_to_policy(allow(BUILD_LOG_ACTIONS, ["*"]))
    return role


def create_pipeline_role(scope: Construct, rn: Callable[[str], str], bucket_arns: Sequence[str]) -> iam.Role:
    """Create the CodePipeline service role."""
    role = create_service_role(
        scope, "CodePipelineRole", "codepipeline.amazonaws.com", role_name=rn("CodePipelineRole")
    )
    role.add_to_policy(allow(["s3:*"], bucket_arns))
    return role


def grant_start_build(pipeline_role: iam.Role, project_arn: str) -> None:
    """Allow the pipeline role to start and poll builds of one project."""
    pipeline_role.add_to_policy(allow(PIPELINE_BUILD_ACTIONS, [project_arn]))

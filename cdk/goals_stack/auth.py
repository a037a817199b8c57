"""Cognito authentication configuration for the goals stack.

This module creates and configures:
- Cognito User Pool with email sign-in and code verification
- User Pool Client for the web app
- Identity Pool federating the user pool
- Authenticated/unauthenticated role attachment
"""

from dataclasses import dataclass
from typing import Callable

from aws_cdk import aws_cognito as cognito
from aws_cdk import aws_iam as iam
from constructs import Construct

from goals_stack.iam_roles import COGNITO_SMS_EXTERNAL_ID, FederatedRoles, create_identity_pool_roles

VERIFICATION_EMAIL_SUBJECT = "Your verification code"
VERIFICATION_EMAIL_BODY = "Here is your verification code: {####}"
VERIFICATION_SMS_MESSAGE = "Your username is {username}, Your verification code is {####}"


@dataclass(frozen=True)
class CognitoAuth:
    user_pool: cognito.UserPool
    user_pool_client: cognito.UserPoolClient
    identity_pool: cognito.CfnIdentityPool
    roles: FederatedRoles

    @property
    def identity_pool_id(self) -> str:
        return self.identity_pool.ref


def _create_password_policy() -> cognito.PasswordPolicy:
    """Create password policy for user pool."""
    return cognito.PasswordPolicy(
        min_length=8, require_lowercase=False, require_uppercase=False, require_digits=False, require_symbols=False
    )


def _create_user_verification() -> cognito.UserVerificationConfig:
    return cognito.UserVerificationConfig(
        email_subject=VERIFICATION_EMAIL_SUBJECT,
        email_body=VERIFICATION_EMAIL_BODY,
        email_style=cognito.VerificationEmailStyle.CODE,
        sms_message=VERIFICATION_SMS_MESSAGE,
    )


def create_user_pool(
    scope: Construct,
    rn: Callable[[str], str],
    sms_role: iam.IRole,
    sms_role_external_id: str = COGNITO_SMS_EXTERNAL_ID,
) -> cognito.UserPool:
    """Create the user pool holding sign-up and verification configuration."""
    return cognito.UserPool(
        scope,
        "UserPool",
        user_pool_name=rn("UserPool"),
        self_sign_up_enabled=True,
        sign_in_aliases=cognito.SignInAliases(email=True),
        standard_attributes=cognito.StandardAttributes(
            email=cognito.StandardAttribute(required=True, mutable=False),
        ),
        auto_verify=cognito.AutoVerifiedAttrs(email=True),
        password_policy=_create_password_policy(),
        user_verification=_create_user_verification(),
        sms_role=sms_role,
        sms_role_external_id=sms_role_external_id,
    )


def create_identity_pool(
    scope: Construct,
    project_name: str,
    user_pool: cognito.UserPool,
    user_pool_client: cognito.UserPoolClient,
) -> cognito.CfnIdentityPool:
    """Create the identity pool federating the user pool client."""
    return cognito.CfnIdentityPool(
        scope,
        "IdentityPool",
        identity_pool_name=f"{project_name}Identity",
        allow_unauthenticated_identities=True,
        cognito_identity_providers=[
            cognito.CfnIdentityPool.CognitoIdentityProviderProperty(
                client_id=user_pool_client.user_pool_client_id,
                provider_name=user_pool.user_pool_provider_name,
            )
        ],
    )


def create_cognito_auth(
    scope: Construct,
    rn: Callable[[str], str],
    project_name: str,
    sms_role: iam.IRole,
    sms_role_external_id: str = COGNITO_SMS_EXTERNAL_ID,
) -> CognitoAuth:
    """Create the user pool, client, identity pool and federated roles.

    Args:
        scope: CDK construct scope
        rn: Resource naming function (name -> formatted name)
        project_name: Project name used for the identity pool name
        sms_role: Role Cognito assumes to send SMS messages
        sms_role_external_id: External ID the SMS role trust policy requires

    Returns:
        CognitoAuth record
    """
    user_pool = create_user_pool(scope, rn, sms_role, sms_role_external_id)

    user_pool_client = cognito.UserPoolClient(
        scope,
        "UserPoolClient",
        user_pool_client_name=rn("UserPoolClient"),
        generate_secret=False,
        user_pool=user_pool,
    )

    identity_pool = create_identity_pool(scope, project_name, user_pool, user_pool_client)
    roles = create_identity_pool_roles(scope, identity_pool.ref)

    cognito.CfnIdentityPoolRoleAttachment(
        scope,
        "DefaultValid",
        identity_pool_id=identity_pool.ref,
        roles={
            "unauthenticated": roles.unauthenticated.role_arn,
            "authenticated": roles.authenticated.role_arn,
        },
    )

    return CognitoAuth(
        user_pool=user_pool,
        user_pool_client=user_pool_client,
        identity_pool=identity_pool,
        roles=roles,
    )

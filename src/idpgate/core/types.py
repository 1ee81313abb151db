"""Enumerated types shared across idpgate.

All enums inherit from :class:`enum.StrEnum` so their ``.value`` is the
exact string that appears on the wire (trigger payloads, provisioning
descriptors, YAML configuration).
"""

from __future__ import annotations

from enum import StrEnum

# ---------------------------------------------------------------------------
# Request time
# ---------------------------------------------------------------------------

PRE_SIGN_UP_PREFIX = "PreSignUp_"


class TriggerSource(StrEnum):
    """Pre-sign-up trigger sub-kinds the gate acts on.

    Trigger payloads carry the prefixed form (``PreSignUp_SignUp``).  The
    bare sub-kind (``SignUp``) resolves to the same member.
    """

    SIGN_UP = "PreSignUp_SignUp"
    EXTERNAL_PROVIDER = "PreSignUp_ExternalProvider"

    @classmethod
    def _missing_(cls, value: object) -> TriggerSource | None:
        if isinstance(value, str):
            for member in cls:
                if member.value.removeprefix(PRE_SIGN_UP_PREFIX) == value:
                    return member
        return None


class RegistrationStatus(StrEnum):
    INVITED = "invited"
    ACTIVE = "active"
    INACTIVE = "inactive"


# ---------------------------------------------------------------------------
# Provisioning time
# ---------------------------------------------------------------------------


class OAuthScope(StrEnum):
    OPENID = "openid"
    EMAIL = "email"
    PROFILE = "profile"


class OAuthFlow(StrEnum):
    AUTHORIZATION_CODE = "code"


class AttributeRequestMethod(StrEnum):
    GET = "GET"
    POST = "POST"


class RemovalPolicy(StrEnum):
    RETAIN = "retain"
    DESTROY = "destroy"


NATIVE_PROVIDER = "COGNITO"

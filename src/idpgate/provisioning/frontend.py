"""Front-end authentication export.

One-way, build-time configuration for the browser authentication
plugin: region, pool and client identifiers, and (for federated
clients only) the hosted broker domain, scopes and redirect sets.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from idpgate.provisioning.pool import PoolDescriptor


def hosted_domain(domain_prefix: str, region: str) -> str:
    return f"{domain_prefix}.auth.{region}.amazoncognito.com"


def frontend_export(
    descriptor: PoolDescriptor,
    region: str,
    user_pool_id: str,
    client_id: str,
) -> dict[str, Any]:
    """Build the ``Auth`` block consumed by the front-end plugin.

    *user_pool_id* and *client_id* are the identifiers assigned when the
    descriptor was deployed.
    """
    auth: dict[str, Any] = {
        "region": region,
        "userPoolId": user_pool_id,
        "userPoolWebClientId": client_id,
    }
    oauth = descriptor.client.oauth
    if oauth is not None:
        auth["oauth"] = {
            "domain": hosted_domain(descriptor.domain["domain_prefix"], region),
            "scope": [s.value for s in oauth.scopes],
            "redirectSignIn": list(oauth.callback_urls),
            "redirectSignOut": list(oauth.logout_urls),
            "responseType": oauth.flows[0].value,
        }
    return {"Auth": auth}

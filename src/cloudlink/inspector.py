"""Read-only questions about a workspace's remote delegation state."""

from __future__ import annotations

from collections.abc import Mapping

from .config import DEFAULT_RUNNER, WorkspaceConfig

ACCESS_TOKEN_ENV = "NX_CLOUD_ACCESS_TOKEN"
CLOUD_API_ENV = "NX_CLOUD_API"
DEFAULT_CLOUD_URL = "https://cloud.nx.app"


def is_remote_delegation_active(config: WorkspaceConfig, env: Mapping[str, str]) -> bool:
    """Return whether task execution is already delegated to the remote service."""

    override = config.default_runner_override
    if override:
        return override == DEFAULT_RUNNER
    # No default runner configured: any access token means the cloud runner is in effect.
    return bool(config.remote_access_token or env.get(ACCESS_TOKEN_ENV))


def is_connected(config: WorkspaceConfig, env: Mapping[str, str]) -> bool:
    """Return whether the workspace is already registered with the remote service."""

    return bool(
        env.get(ACCESS_TOKEN_ENV)
        or config.remote_access_token
        or config.cloud_id
        or config.cloud_runner() is not None
    )


def get_cloud_url(config: WorkspaceConfig, env: Mapping[str, str]) -> str:
    """Resolve the remote service URL the operator signs in at."""

    cloud_runner = config.cloud_runner()
    runner_url = cloud_runner.options.get("url") if cloud_runner is not None else None
    url = env.get(CLOUD_API_ENV) or runner_url or config.cloud_url or DEFAULT_CLOUD_URL
    return str(url).rstrip("/")

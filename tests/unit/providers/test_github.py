"""Unit tests for the GitHub provider."""

import httpx
import pytest

from percolate_identity.providers.github import NAME_GITHUB, GitHubProvider

USER_URL = "https://api.github.com/user"
EMAILS_URL = "https://api.github.com/user/emails"


@pytest.fixture
def github_user():
    return {
        "login": "ada",
        "id": 583231,
        "avatar_url": "https://avatars.githubusercontent.com/u/583231?v=4",
        "name": "Ada Lovelace",
        "email": "ada@example.com",
        "type": "User",
    }


def test_defaults():
    provider = GitHubProvider()
    assert provider.name == NAME_GITHUB
    assert provider.display_name == "GitHub"
    assert provider.auth_url == "https://github.com/login/oauth/authorize"
    assert provider.token_url == "https://github.com/login/oauth/access_token"
    assert provider.scopes == ["read:user", "user:email"]


@pytest.mark.asyncio
async def test_public_profile(route, requests_seen, github_user, token):
    provider = GitHubProvider(transport=route({USER_URL: httpx.Response(200, json=github_user)}))

    user = await provider.fetch_auth_user(token)

    assert user.id == "583231"
    assert user.name == "Ada Lovelace"
    assert user.username == "ada"
    assert user.email == "ada@example.com"
    assert user.avatar_url == "https://avatars.githubusercontent.com/u/583231?v=4"
    assert user.raw_user == github_user
    assert [str(r.url) for r in requests_seen] == [USER_URL]


@pytest.mark.asyncio
async def test_name_falls_back_to_login(route, github_user, token):
    github_user["name"] = None
    provider = GitHubProvider(transport=route({USER_URL: httpx.Response(200, json=github_user)}))

    user = await provider.fetch_auth_user(token)

    assert user.name == "ada"


@pytest.mark.asyncio
async def test_private_email_uses_primary_verified(route, requests_seen, github_user, token):
    github_user["email"] = None
    emails = [
        {"email": "old@example.com", "primary": False, "verified": True},
        {"email": "unverified@example.com", "primary": True, "verified": False},
        {"email": "ada@example.org", "primary": True, "verified": True},
    ]
    provider = GitHubProvider(
        transport=route(
            {
                USER_URL: httpx.Response(200, json=github_user),
                EMAILS_URL: httpx.Response(200, json=emails),
            }
        )
    )

    user = await provider.fetch_auth_user(token)

    assert user.email == "ada@example.org"
    assert user.raw_user == github_user
    assert requests_seen[1].headers["Authorization"] == "Bearer access-123"


@pytest.mark.asyncio
async def test_email_lookup_failure_is_not_fatal(route, github_user, token):
    github_user["email"] = None
    provider = GitHubProvider(
        transport=route(
            {
                USER_URL: httpx.Response(200, json=github_user),
                EMAILS_URL: httpx.Response(403, json={"message": "Resource not accessible"}),
            }
        )
    )

    user = await provider.fetch_auth_user(token)

    assert user.email == ""
    assert user.id == "583231"


@pytest.mark.asyncio
async def test_no_verified_primary_email(route, github_user, token):
    github_user["email"] = None
    emails = [{"email": "ada@example.org", "primary": True, "verified": False}]
    provider = GitHubProvider(
        transport=route(
            {
                USER_URL: httpx.Response(200, json=github_user),
                EMAILS_URL: httpx.Response(200, json=emails),
            }
        )
    )

    user = await provider.fetch_auth_user(token)

    assert user.email == ""

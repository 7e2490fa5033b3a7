"""Shared test helpers for authentication and seeding."""
from __future__ import annotations

from freelancy_api.auth.firebase import InvalidTokenError
from freelancy_api.auth.identity import Principal


class FakeVerifier:
    """
    Accepts tokens of the form ``token:<email>``; everything else is rejected
    the way the real verifier rejects a bad token.
    """

    def __init__(self) -> None:
        self.calls: list[str] = []

    def verify(self, token: str) -> Principal:
        self.calls.append(token)
        if not token.startswith("token:"):
            raise InvalidTokenError("not a test token")
        email = token.split(":", 1)[1]
        return Principal.from_claims({"sub": f"uid-{email}", "email": email})


def auth_header(email: str) -> dict[str, str]:
    return {"Authorization": f"Bearer token:{email}"}


def create_job(client, email: str, **fields) -> str:
    res = client.post("/Jobs", json={"email": email, **fields})
    assert res.status_code == 200, res.text
    return res.json()["insertedId"]


def accept_job(client, job_id: str | None, **fields) -> str:
    body = dict(fields)
    if job_id is not None:
        body["jobId"] = job_id
    res = client.post("/accepted-tasks", json=body)
    assert res.status_code == 200, res.text
    return res.json()["insertedId"]

"""
Fixtures for executing the GraphQL schema against a SQLite database.
"""

import uuid
from typing import Any

import pytest

from trackly.graphql.schema import schema

SIGNUP = """
mutation AddUser($input: AddUserInput!) {
    addUser(input: $input) { token user { id name email role } }
}
"""

ADD_PROJECT = """
mutation AddProject($input: AddProjectInput!) {
    addProject(input: $input) { id title owners { id } clients { id } tasks { id } }
}
"""

ADD_CLIENT = """
mutation AddClient($projectId: UUID!, $clientInput: ClientInput!) {
    addClientToProject(projectId: $projectId, clientInput: $clientInput) {
        id clients { id email role }
    }
}
"""

ADD_TASK = """
mutation AddTask($input: AddTaskInput!) {
    addTask(input: $input) { id projectId title description status }
}
"""


def error_code(result: Any) -> str | None:
    """The ``extensions.code`` of the first error of an execution result."""
    assert result.errors, "expected the operation to fail"
    return (result.errors[0].extensions or {}).get("code")


@pytest.fixture
def gql(database, auth_context_for):
    """Execute a document, optionally as the user with the given id."""

    async def run(query: str, variables: dict | None = None, *, as_user: uuid.UUID | None = None):
        return await schema.execute(
            query,
            variable_values=variables,
            context_value={"auth": auth_context_for(as_user)},
        )

    return run


@pytest.fixture
def signup(gql):
    """Register a user through ``addUser`` and return its id, token and email."""

    async def run(name: str = "Ada", email: str | None = None, password: str = "correct horse"):
        email = email or f"{name.lower()}-{uuid.uuid4().hex[:8]}@example.com"
        result = await gql(
            SIGNUP, {"input": {"name": name, "email": email, "password": password}}
        )
        assert result.errors is None, result.errors
        payload = result.data["addUser"]
        return {
            "id": uuid.UUID(payload["user"]["id"]),
            "token": payload["token"],
            "email": payload["user"]["email"],
            "password": password,
        }

    return run


@pytest.fixture
def create_project(gql):
    async def run(owner_id: uuid.UUID, title: str = "Website"):
        result = await gql(ADD_PROJECT, {"input": {"title": title}}, as_user=owner_id)
        assert result.errors is None, result.errors
        return result.data["addProject"]

    return run


@pytest.fixture
def add_client(gql):
    async def run(owner_id: uuid.UUID, project_id: str, client_input: dict):
        result = await gql(
            ADD_CLIENT, {"projectId": project_id, "clientInput": client_input}, as_user=owner_id
        )
        assert result.errors is None, result.errors
        return result.data["addClientToProject"]

    return run


@pytest.fixture
def create_task(gql):
    async def run(user_id: uuid.UUID, project_id: str, title: str = "Write copy", **extra):
        result = await gql(
            ADD_TASK, {"input": {"projectId": project_id, "title": title, **extra}}, as_user=user_id
        )
        assert result.errors is None, result.errors
        return result.data["addTask"]

    return run


@pytest.fixture(name="error_code")
def error_code_fixture():
    return error_code

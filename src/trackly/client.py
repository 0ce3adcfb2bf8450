"""Async Python client for the Trackly GraphQL API.

The client keeps no session state: every call that needs a logged-in user
takes the bearer ``token`` returned by :meth:`TracklyClient.signup` or
:meth:`TracklyClient.login` as an explicit argument.

Example::

    async with TracklyClient("http://localhost:3001") as client:
        session = await client.login("ada@example.com", "correct horse")
        projects = await client.my_projects(session["token"])
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from typing import Any

import httpx

from .errors import TracklyError, error_from_code
from .logging import get_logger
from .validation import parse_hours

logger = get_logger(__name__)

USER_FIELDS = "id name email role createdAt updatedAt"
PROJECT_FIELDS = f"""
    id title createdAt updatedAt
    owners {{ {USER_FIELDS} }}
    clients {{ {USER_FIELDS} }}
    tasks {{ id title description status createdAt updatedAt }}
"""
COMMENT_FIELDS = f"id body createdAt user {{ {USER_FIELDS} }}"
LOGGED_TIME_FIELDS = f"id description hours date createdAt user {{ {USER_FIELDS} }}"
TASK_FIELDS = f"""
    id projectId title description status createdAt updatedAt totalHours
    comments {{ {COMMENT_FIELDS} }}
    timeLog {{ {LOGGED_TIME_FIELDS} }}
"""
AUTH_FIELDS = f"token user {{ {USER_FIELDS} }}"


class TracklyClientError(TracklyError):
    """The API could not be reached or returned a malformed response."""

    code = "CLIENT_ERROR"
    default_message = "Request to the Trackly API failed."


def total_hours(time_log: Iterable[dict[str, Any]]) -> float:
    """Sum the ``hours`` of logged time entries, reading invalid values as 0."""
    return sum(parse_hours(entry.get("hours")) for entry in time_log)


def _status(value: str | None) -> str | None:
    return value.upper() if value is not None else None


def _without_none(values: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in values.items() if value is not None}


class TracklyClient:
    """Thin wrapper over ``httpx.AsyncClient`` with one coroutine per operation."""

    def __init__(
        self,
        base_url: str,
        *,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
        graphql_path: str = "/graphql",
    ):
        self.graphql_path = graphql_path
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(base_url=base_url, timeout=timeout)

    async def __aenter__(self) -> TracklyClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()

    async def execute(
        self,
        document: str,
        variables: dict[str, Any] | None = None,
        *,
        token: str | None = None,
    ) -> dict[str, Any]:
        """Run a GraphQL document and return its ``data``.

        Raises:
            TracklyError: The subclass matching the first error's code.
            TracklyClientError: On transport failures or non-GraphQL responses.
        """
        headers = {"Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        try:
            response = await self._http.post(
                self.graphql_path,
                json={"query": document, "variables": variables or {}},
                headers=headers,
            )
        except httpx.HTTPError as e:
            logger.warning("Trackly API request failed", error=str(e))
            raise TracklyClientError(str(e)) from e

        try:
            payload = response.json()
        except ValueError as e:
            raise TracklyClientError(
                f"Trackly API returned {response.status_code} with a non-JSON body"
            ) from e

        errors = payload.get("errors")
        if errors:
            first = errors[0]
            code = (first.get("extensions") or {}).get("code")
            raise error_from_code(code, first.get("message"))

        if response.status_code != 200 or payload.get("data") is None:
            raise TracklyClientError(f"Trackly API request failed: {response.status_code}")

        return payload["data"]

    # Session
    async def signup(self, name: str, email: str, password: str) -> dict[str, Any]:
        data = await self.execute(
            f"""
            mutation AddUser($input: AddUserInput!) {{
                addUser(input: $input) {{ {AUTH_FIELDS} }}
            }}
            """,
            {"input": {"name": name, "email": email, "password": password}},
        )
        return data["addUser"]

    async def login(self, email: str, password: str) -> dict[str, Any]:
        data = await self.execute(
            f"""
            mutation Login($email: String!, $password: String!) {{
                login(email: $email, password: $password) {{ {AUTH_FIELDS} }}
            }}
            """,
            {"email": email, "password": password},
        )
        return data["login"]

    # Users
    async def me(self, token: str) -> dict[str, Any]:
        data = await self.execute(f"query Me {{ me {{ {USER_FIELDS} }} }}", token=token)
        return data["me"]

    async def update_user(
        self,
        token: str,
        *,
        name: str | None = None,
        email: str | None = None,
        password: str | None = None,
    ) -> dict[str, Any]:
        data = await self.execute(
            f"""
            mutation UpdateUser($input: UpdateUserInput!) {{
                updateUser(input: $input) {{ {USER_FIELDS} }}
            }}
            """,
            {"input": _without_none({"name": name, "email": email, "password": password})},
            token=token,
        )
        return data["updateUser"]

    async def delete_user(self, token: str, password: str) -> dict[str, Any]:
        data = await self.execute(
            f"""
            mutation DeleteUser($password: String!) {{
                deleteUser(password: $password) {{ {USER_FIELDS} }}
            }}
            """,
            {"password": password},
            token=token,
        )
        return data["deleteUser"]

    # Projects
    async def my_projects(self, token: str) -> list[dict[str, Any]]:
        data = await self.execute(
            f"query MyProjects {{ myProjects {{ {PROJECT_FIELDS} }} }}", token=token
        )
        return data["myProjects"]

    async def project(self, token: str, project_id: str) -> dict[str, Any]:
        data = await self.execute(
            f"query Project($id: UUID!) {{ project(id: $id) {{ {PROJECT_FIELDS} }} }}",
            {"id": str(project_id)},
            token=token,
        )
        return data["project"]

    async def add_project(self, token: str, title: str) -> dict[str, Any]:
        data = await self.execute(
            f"""
            mutation AddProject($input: AddProjectInput!) {{
                addProject(input: $input) {{ {PROJECT_FIELDS} }}
            }}
            """,
            {"input": {"title": title}},
            token=token,
        )
        return data["addProject"]

    async def update_project_title(self, token: str, project_id: str, title: str) -> dict[str, Any]:
        data = await self.execute(
            f"""
            mutation UpdateProjectTitle($projectId: UUID!, $title: String!) {{
                updateProjectTitle(projectId: $projectId, title: $title) {{ {PROJECT_FIELDS} }}
            }}
            """,
            {"projectId": str(project_id), "title": title},
            token=token,
        )
        return data["updateProjectTitle"]

    async def add_client_to_project(
        self,
        token: str,
        project_id: str,
        email: str,
        *,
        name: str | None = None,
        password: str | None = None,
    ) -> dict[str, Any]:
        data = await self.execute(
            f"""
            mutation AddClientToProject($projectId: UUID!, $clientInput: ClientInput!) {{
                addClientToProject(projectId: $projectId, clientInput: $clientInput) {{
                    {PROJECT_FIELDS}
                }}
            }}
            """,
            {
                "projectId": str(project_id),
                "clientInput": _without_none({"email": email, "name": name, "password": password}),
            },
            token=token,
        )
        return data["addClientToProject"]

    async def delete_project(
        self, token: str, project_id: str, password: str | None = None
    ) -> dict[str, Any]:
        data = await self.execute(
            """
            mutation DeleteProject($projectId: UUID!, $password: String) {
                deleteProject(projectId: $projectId, password: $password) { id title }
            }
            """,
            {"projectId": str(project_id), "password": password},
            token=token,
        )
        return data["deleteProject"]

    # Tasks
    async def task(self, token: str, task_id: str) -> dict[str, Any]:
        data = await self.execute(
            f"query Task($id: UUID!) {{ task(id: $id) {{ {TASK_FIELDS} }} }}",
            {"id": str(task_id)},
            token=token,
        )
        return data["task"]

    async def add_task(
        self,
        token: str,
        project_id: str,
        title: str,
        *,
        description: str | None = None,
        status: str | None = None,
    ) -> dict[str, Any]:
        data = await self.execute(
            f"""
            mutation AddTask($input: AddTaskInput!) {{
                addTask(input: $input) {{ {TASK_FIELDS} }}
            }}
            """,
            {
                "input": _without_none(
                    {
                        "projectId": str(project_id),
                        "title": title,
                        "description": description,
                        "status": _status(status),
                    }
                )
            },
            token=token,
        )
        return data["addTask"]

    async def update_task(
        self,
        token: str,
        task_id: str,
        *,
        title: str | None = None,
        description: str | None = None,
        status: str | None = None,
    ) -> dict[str, Any]:
        data = await self.execute(
            f"""
            mutation UpdateTask($input: UpdateTaskInput!) {{
                updateTask(input: $input) {{ {TASK_FIELDS} }}
            }}
            """,
            {
                "input": _without_none(
                    {
                        "taskId": str(task_id),
                        "title": title,
                        "description": description,
                        "status": _status(status),
                    }
                )
            },
            token=token,
        )
        return data["updateTask"]

    async def delete_task(self, token: str, task_id: str) -> dict[str, Any]:
        data = await self.execute(
            """
            mutation DeleteTask($taskId: UUID!) {
                deleteTask(taskId: $taskId) { id title projectId }
            }
            """,
            {"taskId": str(task_id)},
            token=token,
        )
        return data["deleteTask"]

    # Comments
    async def add_comment(self, token: str, task_id: str, body: str) -> dict[str, Any]:
        data = await self.execute(
            f"""
            mutation AddComment($taskId: UUID!, $body: String!) {{
                addComment(taskId: $taskId, body: $body) {{ {COMMENT_FIELDS} }}
            }}
            """,
            {"taskId": str(task_id), "body": body},
            token=token,
        )
        return data["addComment"]

    async def delete_comment(self, token: str, comment_id: str) -> dict[str, Any]:
        data = await self.execute(
            """
            mutation DeleteComment($commentId: UUID!) {
                deleteComment(commentId: $commentId) { id body }
            }
            """,
            {"commentId": str(comment_id)},
            token=token,
        )
        return data["deleteComment"]

    # Logged time
    async def add_logged_time(
        self,
        token: str,
        task_id: str,
        description: str,
        hours: float | str,
        *,
        date: datetime | None = None,
    ) -> dict[str, Any]:
        data = await self.execute(
            f"""
            mutation AddLoggedTime($input: LoggedTimeInput!) {{
                addLoggedTime(input: $input) {{ {LOGGED_TIME_FIELDS} task {{ id }} }}
            }}
            """,
            {
                "input": _without_none(
                    {
                        "taskId": str(task_id),
                        "description": description,
                        "hours": hours,
                        "date": date.isoformat() if date else None,
                    }
                )
            },
            token=token,
        )
        return data["addLoggedTime"]

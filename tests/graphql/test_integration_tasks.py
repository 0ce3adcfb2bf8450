"""
Integration tests for task queries and mutations
"""

import uuid

import pytest
import pytest_asyncio

from trackly.dbmodels import Comments, LoggedTimes, Tasks

TASK = """
query Task($id: UUID!) {
    task(id: $id) { id title status project { id } comments { id } timeLog { id } totalHours }
}
"""

UPDATE_TASK = """
mutation UpdateTask($input: UpdateTaskInput!) {
    updateTask(input: $input) { id title description status projectId }
}
"""

DELETE_TASK = """
mutation DeleteTask($taskId: UUID!) {
    deleteTask(taskId: $taskId) { id projectId }
}
"""


@pytest_asyncio.fixture
async def project_with_client(signup, create_project, add_client):
    owner = await signup("Owner")
    client = await signup("Client")
    project = await create_project(owner["id"])
    await add_client(owner["id"], project["id"], {"email": client["email"]})
    return owner, client, project


@pytest.mark.integration
class TestAddTask:
    @pytest.mark.asyncio
    async def test_task_appears_once_in_project(self, gql, signup, create_project, create_task):
        owner = await signup()
        project = await create_project(owner["id"])

        task = await create_task(owner["id"], project["id"], title="Draft", description="Body")

        assert task["projectId"] == project["id"]
        assert task["status"] == "TODO"
        result = await gql(
            "query($id: UUID!) { project(id: $id) { tasks { id } } }",
            {"id": project["id"]},
            as_user=owner["id"],
        )
        task_ids = [t["id"] for t in result.data["project"]["tasks"]]
        assert task_ids.count(task["id"]) == 1

    @pytest.mark.asyncio
    async def test_tasks_are_ordered_by_creation(self, gql, signup, create_project, create_task):
        owner = await signup()
        project = await create_project(owner["id"])
        first = await create_task(owner["id"], project["id"], title="First")
        second = await create_task(owner["id"], project["id"], title="Second")

        result = await gql(
            "query($id: UUID!) { project(id: $id) { tasks { id } } }",
            {"id": project["id"]},
            as_user=owner["id"],
        )
        assert [t["id"] for t in result.data["project"]["tasks"]] == [first["id"], second["id"]]

    @pytest.mark.asyncio
    async def test_owner_chooses_status(self, signup, create_project, create_task):
        owner = await signup()
        project = await create_project(owner["id"])

        task = await create_task(owner["id"], project["id"], status="IN_PROGRESS")
        assert task["status"] == "IN_PROGRESS"

    @pytest.mark.asyncio
    async def test_client_tasks_start_as_requested(self, project_with_client, create_task):
        _, client, project = project_with_client

        task = await create_task(client["id"], project["id"], status="DONE")
        assert task["status"] == "REQUESTED"

    @pytest.mark.asyncio
    async def test_stranger_cannot_add_task(
        self, gql, signup, create_project, error_code, count_rows
    ):
        owner = await signup("Owner")
        stranger = await signup("Stranger")
        project = await create_project(owner["id"])

        result = await gql(
            'mutation($p: UUID!) { addTask(input: {projectId: $p, title: "x"}) { id } }',
            {"p": project["id"]},
            as_user=stranger["id"],
        )

        assert error_code(result) == "FORBIDDEN"
        assert await count_rows(Tasks) == 0

    @pytest.mark.asyncio
    async def test_requires_session(self, gql, error_code, count_rows):
        result = await gql(
            'mutation($p: UUID!) { addTask(input: {projectId: $p, title: "x"}) { id } }',
            {"p": str(uuid.uuid4())},
        )

        assert error_code(result) == "UNAUTHENTICATED"
        assert await count_rows(Tasks) == 0

    @pytest.mark.asyncio
    async def test_missing_project(self, gql, signup, error_code):
        user = await signup()

        result = await gql(
            'mutation($p: UUID!) { addTask(input: {projectId: $p, title: "x"}) { id } }',
            {"p": str(uuid.uuid4())},
            as_user=user["id"],
        )
        assert error_code(result) == "NOT_FOUND"


@pytest.mark.integration
class TestTaskQuery:
    @pytest.mark.asyncio
    async def test_client_can_read_task(self, gql, project_with_client, create_task):
        owner, client, project = project_with_client
        task = await create_task(owner["id"], project["id"])

        result = await gql(TASK, {"id": task["id"]}, as_user=client["id"])

        assert result.errors is None
        assert result.data["task"]["project"] == {"id": project["id"]}
        assert result.data["task"]["comments"] == []
        assert result.data["task"]["timeLog"] == []
        assert result.data["task"]["totalHours"] == 0.0

    @pytest.mark.asyncio
    async def test_stranger_cannot_read_task(
        self, gql, signup, create_project, create_task, error_code
    ):
        owner = await signup("Owner")
        stranger = await signup("Stranger")
        project = await create_project(owner["id"])
        task = await create_task(owner["id"], project["id"])

        result = await gql(TASK, {"id": task["id"]}, as_user=stranger["id"])
        assert error_code(result) == "FORBIDDEN"

    @pytest.mark.asyncio
    async def test_missing_task(self, gql, signup, error_code):
        user = await signup()

        result = await gql(TASK, {"id": str(uuid.uuid4())}, as_user=user["id"])
        assert error_code(result) == "NOT_FOUND"


@pytest.mark.integration
class TestUpdateTask:
    @pytest.mark.asyncio
    async def test_owner_partial_update(self, gql, project_with_client, create_task):
        owner, _, project = project_with_client
        task = await create_task(owner["id"], project["id"], title="Old", description="Keep")

        result = await gql(
            UPDATE_TASK,
            {"input": {"taskId": task["id"], "title": "New", "status": "DONE"}},
            as_user=owner["id"],
        )

        assert result.errors is None
        updated = result.data["updateTask"]
        assert updated["title"] == "New"
        assert updated["description"] == "Keep"
        assert updated["status"] == "DONE"
        assert updated["projectId"] == project["id"]

    @pytest.mark.asyncio
    async def test_client_cannot_update(
        self, gql, project_with_client, create_task, error_code, count_rows
    ):
        owner, client, project = project_with_client
        task = await create_task(owner["id"], project["id"], title="Old")

        result = await gql(
            UPDATE_TASK, {"input": {"taskId": task["id"], "title": "Mine"}}, as_user=client["id"]
        )

        assert error_code(result) == "FORBIDDEN"
        assert await count_rows(Tasks, Tasks.title == "Old") == 1

    @pytest.mark.asyncio
    async def test_validation(self, gql, signup, create_project, create_task, error_code):
        owner = await signup()
        project = await create_project(owner["id"])
        task = await create_task(owner["id"], project["id"])

        result = await gql(
            UPDATE_TASK, {"input": {"taskId": task["id"], "title": ""}}, as_user=owner["id"]
        )
        assert error_code(result) == "VALIDATION_FAILED"


@pytest.mark.integration
class TestDeleteTask:
    @pytest.mark.asyncio
    async def test_owner_delete_cascades(self, gql, project_with_client, create_task, count_rows):
        owner, client, project = project_with_client
        task = await create_task(owner["id"], project["id"])
        kept = await create_task(owner["id"], project["id"], title="Kept")
        await gql(
            "mutation($t: UUID!) { addComment(taskId: $t, body: \"hello\") { id } }",
            {"t": task["id"]},
            as_user=client["id"],
        )
        await gql(
            """
            mutation($t: UUID!) {
                addLoggedTime(input: {taskId: $t, description: "work", hours: 1.5}) { id }
            }
            """,
            {"t": task["id"]},
            as_user=owner["id"],
        )

        result = await gql(DELETE_TASK, {"taskId": task["id"]}, as_user=owner["id"])

        assert result.errors is None
        assert result.data["deleteTask"] == {"id": task["id"], "projectId": project["id"]}
        assert await count_rows(Tasks) == 1
        assert await count_rows(Tasks, Tasks.id == uuid.UUID(kept["id"])) == 1
        assert await count_rows(Comments) == 0
        assert await count_rows(LoggedTimes) == 0

    @pytest.mark.asyncio
    async def test_client_cannot_delete(
        self, gql, project_with_client, create_task, error_code, count_rows
    ):
        owner, client, project = project_with_client
        task = await create_task(owner["id"], project["id"])

        result = await gql(DELETE_TASK, {"taskId": task["id"]}, as_user=client["id"])

        assert error_code(result) == "FORBIDDEN"
        assert await count_rows(Tasks) == 1

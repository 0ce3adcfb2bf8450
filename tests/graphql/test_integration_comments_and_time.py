"""
Integration tests for comments and logged time
"""

import pytest
import pytest_asyncio

from trackly.dbmodels import Comments, LoggedTimes

ADD_COMMENT = """
mutation AddComment($taskId: UUID!, $body: String!) {
    addComment(taskId: $taskId, body: $body) { id body user { id name } task { id } }
}
"""

DELETE_COMMENT = """
mutation DeleteComment($commentId: UUID!) {
    deleteComment(commentId: $commentId) { id }
}
"""

ADD_LOGGED_TIME = """
mutation AddLoggedTime($input: LoggedTimeInput!) {
    addLoggedTime(input: $input) { id description hours date user { id } task { id } }
}
"""


@pytest_asyncio.fixture
async def task_setup(signup, create_project, add_client, create_task):
    """An owner, a client and a stranger around one task."""
    owner = await signup("Owner")
    client = await signup("Client")
    stranger = await signup("Stranger")
    project = await create_project(owner["id"])
    await add_client(owner["id"], project["id"], {"email": client["email"]})
    task = await create_task(owner["id"], project["id"])
    return {"owner": owner, "client": client, "stranger": stranger, "task": task}


@pytest.mark.integration
class TestComments:
    @pytest.mark.asyncio
    async def test_member_comments_with_author(self, gql, task_setup):
        client = task_setup["client"]

        result = await gql(
            ADD_COMMENT,
            {"taskId": task_setup["task"]["id"], "body": "Looks good"},
            as_user=client["id"],
        )

        assert result.errors is None
        comment = result.data["addComment"]
        assert comment["body"] == "Looks good"
        assert comment["user"] == {"id": str(client["id"]), "name": "Client"}
        assert comment["task"] == {"id": task_setup["task"]["id"]}

    @pytest.mark.asyncio
    async def test_comments_listed_on_task_in_order(self, gql, task_setup):
        task_id = task_setup["task"]["id"]
        for body, user in (("first", "owner"), ("second", "client")):
            await gql(
                ADD_COMMENT, {"taskId": task_id, "body": body}, as_user=task_setup[user]["id"]
            )

        result = await gql(
            "query($id: UUID!) { task(id: $id) { comments { body } } }",
            {"id": task_id},
            as_user=task_setup["owner"]["id"],
        )
        assert result.data["task"]["comments"] == [{"body": "first"}, {"body": "second"}]

    @pytest.mark.asyncio
    async def test_stranger_cannot_comment(self, gql, task_setup, error_code, count_rows):
        result = await gql(
            ADD_COMMENT,
            {"taskId": task_setup["task"]["id"], "body": "hi"},
            as_user=task_setup["stranger"]["id"],
        )

        assert error_code(result) == "FORBIDDEN"
        assert await count_rows(Comments) == 0

    @pytest.mark.asyncio
    async def test_empty_body(self, gql, task_setup, error_code):
        result = await gql(
            ADD_COMMENT,
            {"taskId": task_setup["task"]["id"], "body": "   "},
            as_user=task_setup["owner"]["id"],
        )
        assert error_code(result) == "VALIDATION_FAILED"

    @pytest.mark.asyncio
    async def test_only_author_can_delete(self, gql, task_setup, error_code, count_rows):
        created = await gql(
            ADD_COMMENT,
            {"taskId": task_setup["task"]["id"], "body": "mine"},
            as_user=task_setup["client"]["id"],
        )
        comment_id = created.data["addComment"]["id"]

        # Not even a project owner may delete someone else's comment
        by_owner = await gql(
            DELETE_COMMENT, {"commentId": comment_id}, as_user=task_setup["owner"]["id"]
        )
        assert error_code(by_owner) == "FORBIDDEN"
        assert await count_rows(Comments) == 1

        by_author = await gql(
            DELETE_COMMENT, {"commentId": comment_id}, as_user=task_setup["client"]["id"]
        )
        assert by_author.errors is None
        assert by_author.data["deleteComment"] == {"id": comment_id}
        assert await count_rows(Comments) == 0

    @pytest.mark.asyncio
    async def test_delete_requires_session(self, gql, task_setup, error_code, count_rows):
        created = await gql(
            ADD_COMMENT,
            {"taskId": task_setup["task"]["id"], "body": "mine"},
            as_user=task_setup["client"]["id"],
        )

        result = await gql(DELETE_COMMENT, {"commentId": created.data["addComment"]["id"]})

        assert error_code(result) == "UNAUTHENTICATED"
        assert await count_rows(Comments) == 1


@pytest.mark.integration
class TestLoggedTime:
    @pytest.mark.asyncio
    async def test_owner_logs_time(self, gql, task_setup):
        owner = task_setup["owner"]

        result = await gql(
            ADD_LOGGED_TIME,
            {
                "input": {
                    "taskId": task_setup["task"]["id"],
                    "description": "Design",
                    "hours": 2.5,
                    "date": "2025-03-01T09:00:00+00:00",
                }
            },
            as_user=owner["id"],
        )

        assert result.errors is None
        entry = result.data["addLoggedTime"]
        assert entry["hours"] == 2.5
        assert entry["date"].startswith("2025-03-01T09:00:00")
        assert entry["user"] == {"id": str(owner["id"])}
        assert entry["task"] == {"id": task_setup["task"]["id"]}

    @pytest.mark.asyncio
    async def test_numeric_string_hours(self, gql, task_setup):
        result = await gql(
            ADD_LOGGED_TIME,
            {"input": {"taskId": task_setup["task"]["id"], "description": "x", "hours": "1.25"}},
            as_user=task_setup["owner"]["id"],
        )
        assert result.data["addLoggedTime"]["hours"] == 1.25

    @pytest.mark.asyncio
    async def test_non_numeric_hours_stored_as_zero(self, gql, task_setup, count_rows):
        result = await gql(
            ADD_LOGGED_TIME,
            {"input": {"taskId": task_setup["task"]["id"], "description": "x", "hours": "abc"}},
            as_user=task_setup["owner"]["id"],
        )

        assert result.errors is None
        assert result.data["addLoggedTime"]["hours"] == 0.0
        assert await count_rows(LoggedTimes, LoggedTimes.hours == 0.0) == 1

    @pytest.mark.asyncio
    async def test_non_numeric_literal_hours(self, gql, task_setup):
        result = await gql(
            """
            mutation($t: UUID!) {
                addLoggedTime(input: {taskId: $t, description: "x", hours: "lots"}) { hours }
            }
            """,
            {"t": task_setup["task"]["id"]},
            as_user=task_setup["owner"]["id"],
        )

        assert result.errors is None
        assert result.data["addLoggedTime"]["hours"] == 0.0

    @pytest.mark.asyncio
    async def test_client_cannot_log_time(self, gql, task_setup, error_code, count_rows):
        result = await gql(
            ADD_LOGGED_TIME,
            {"input": {"taskId": task_setup["task"]["id"], "description": "x", "hours": 1}},
            as_user=task_setup["client"]["id"],
        )

        assert error_code(result) == "FORBIDDEN"
        assert await count_rows(LoggedTimes) == 0

    @pytest.mark.asyncio
    async def test_total_hours(self, gql, task_setup):
        task_id = task_setup["task"]["id"]
        for hours in (1.5, "2", "oops"):
            await gql(
                ADD_LOGGED_TIME,
                {"input": {"taskId": task_id, "description": "work", "hours": hours}},
                as_user=task_setup["owner"]["id"],
            )

        result = await gql(
            "query($id: UUID!) { task(id: $id) { totalHours timeLog { hours } } }",
            {"id": task_id},
            as_user=task_setup["client"]["id"],
        )

        assert result.data["task"]["totalHours"] == 3.5
        assert [e["hours"] for e in result.data["task"]["timeLog"]] == [1.5, 2.0, 0.0]

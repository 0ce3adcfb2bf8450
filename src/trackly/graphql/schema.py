"""
Main GraphQL schema definition using Strawberry
"""

from typing import Any

import strawberry
from fastapi import Request
from graphql import GraphQLError
from graphql import validate_schema as gql_validate_schema
from strawberry.extensions import MaskErrors
from strawberry.fastapi import GraphQLRouter

from ..auth.middleware import get_auth_context_optional
from ..config import settings
from ..errors import TracklyError
from ..logging import bind_user_id, get_logger
from .mutations.root import Mutation
from .queries.root import Query

logger = get_logger(__name__)

UNEXPECTED_ERROR_MESSAGE = "Unexpected error."


def should_mask_error(error: GraphQLError) -> bool:
    """Hide everything raised from resolvers except TracklyError subclasses.

    Parse and validation errors carry no original error and are shown as is.
    """
    original = error.original_error
    if original is None or isinstance(original, TracklyError):
        return False

    logger.error(
        "Unexpected error in GraphQL resolver",
        path=error.path,
        error_type=type(original).__name__,
        error=str(original),
    )
    return True


# Create the GraphQL schema
schema = strawberry.Schema(
    query=Query,
    mutation=Mutation,
    extensions=[
        MaskErrors(should_mask_error=should_mask_error, error_message=UNEXPECTED_ERROR_MESSAGE),
    ],
)


def validate_schema() -> None:
    """Validate the GraphQL schema at startup.

    This ensures that all type references can be resolved and catches
    circular reference errors early, causing the server to fail fast
    rather than returning 404s at runtime.

    Raises:
        RuntimeError: If the schema is invalid or has unresolved types
    """
    try:
        graphql_schema = schema._schema

        errors = gql_validate_schema(graphql_schema)
        if errors:
            error_messages = [str(e) for e in errors]
            raise RuntimeError(f"GraphQL schema validation failed: {'; '.join(error_messages)}")

        # Check that introspection query works (catches most resolution issues)
        from graphql import get_introspection_query, graphql_sync

        result = graphql_sync(graphql_schema, get_introspection_query())
        if result.errors:
            error_messages = [str(e) for e in result.errors]
            raise RuntimeError(f"GraphQL introspection failed: {'; '.join(error_messages)}")

        logger.info("GraphQL schema validation successful")

    except Exception as e:
        logger.error("GraphQL schema validation failed", error=str(e))
        raise


async def get_context(request: Request) -> dict[str, Any]:
    """Build the resolver context, verifying the bearer token once per request."""
    auth_context = await get_auth_context_optional(request.headers.get("authorization"))
    if auth_context.user_id is not None:
        bind_user_id(str(auth_context.user_id))

    return {
        "request": request,
        "auth": auth_context,
    }


# Create the GraphQL router for FastAPI integration
def create_graphql_router() -> GraphQLRouter[dict[str, Any], None]:
    """Create a GraphQL router for FastAPI."""
    return GraphQLRouter(
        schema,
        path="/graphql",
        graphiql=settings.graphiql,
        context_getter=get_context,
    )

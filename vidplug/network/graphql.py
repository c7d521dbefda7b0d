"""
GraphQL Client - Standard and persisted GraphQL queries.

Supports both standard GraphQL queries (POST ``{query, variables}``) and
persisted queries (GET with the query's sha256 hash in ``extensions``), as
used by platforms that require query pre-registration.

The ``execute_*`` methods never raise: every failure, including unexpected
exceptions, comes back as the error half of a ``GraphQLResult``. The
``query`` and ``persisted_query`` shortcuts raise ``GraphQLError`` instead.
"""

import json
import logging
from enum import Enum
from typing import Any, Callable, Dict, List, NamedTuple, Optional
from urllib.parse import urlencode

from pydantic import BaseModel, Field

from vidplug.core.exceptions import APIError, ConfigurationError, GraphQLError
from vidplug.network.client import NetworkClient
from vidplug.network.request import DEFAULT_RETRIES


logger = logging.getLogger(__name__)


BASE_URL_MISSING = "Base URL not configured. Check settings[baseUrl].options in config.json"


class GraphQLErrorCode(str, Enum):
    """Error codes produced by the GraphQL layer."""

    INVALID_QUERY = "INVALID_QUERY"
    GQL_ERROR = "GQL_ERROR"
    EXCEPTION = "EXCEPTION"
    INVALID_PERSISTED_QUERY = "INVALID_PERSISTED_QUERY"

    def __str__(self) -> str:
        return self.value


class GraphQLErrorInfo(BaseModel):
    """Error half of a GraphQL result."""

    code: GraphQLErrorCode
    message: str
    errors: Optional[List[Any]] = None
    operation_name: Optional[str] = None


class GraphQLResult(NamedTuple):
    """``(error, data)`` pair; at most one side is meaningful."""

    error: Optional[GraphQLErrorInfo]
    data: Any


class GraphQLQuery(BaseModel):
    """Options for a standard GraphQL query."""

    query: Optional[str] = None
    variables: Dict[str, Any] = Field(default_factory=dict)
    headers: Dict[str, str] = Field(default_factory=dict)
    use_auth: bool = False
    endpoint: str = "/graphql"
    retries: int = Field(default=DEFAULT_RETRIES, ge=0)


class PersistedQuery(BaseModel):
    """Options for a persisted (hash-referenced) GraphQL query."""

    operation_name: Optional[str] = None
    sha256_hash: Optional[str] = None
    version: int = Field(default=1, ge=1)
    variables: Dict[str, Any] = Field(default_factory=dict)
    headers: Dict[str, str] = Field(default_factory=dict)
    use_auth: bool = False
    retries: int = Field(default=DEFAULT_RETRIES, ge=0)


def compact_json(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"))


def join_url(base_url: str, endpoint: str) -> str:
    """
    Join an endpoint to a base URL with exactly one slash between them.

    Raises:
        ConfigurationError: If the base URL is unresolved
    """
    if not base_url:
        raise ConfigurationError(BASE_URL_MISSING)
    path = endpoint if endpoint.startswith("/") else f"/{endpoint}"
    return base_url.rstrip("/") + path


def build_persisted_query_params(query: PersistedQuery) -> str:
    """Query string carrying operationName, variables and the persisted query hash."""
    params = {"operationName": query.operation_name}
    if query.variables:
        params["variables"] = compact_json(query.variables)
    params["extensions"] = compact_json({
        "persistedQuery": {
            "version": query.version,
            "sha256Hash": query.sha256_hash,
        }
    })
    return urlencode(params)


class GraphQLClient:
    """GraphQL queries against the resolved base URL."""

    def __init__(self, client: NetworkClient, get_base_url: Callable[[], str]):
        """
        Initialize the GraphQL client.

        Args:
            client: Convenience network client
            get_base_url: Resolves the active endpoint; consulted on every call
        """
        self.client = client
        self.get_base_url = get_base_url

    def resolve_endpoint(self, endpoint: str) -> str:
        if endpoint.startswith("http"):
            return endpoint
        return join_url(self.get_base_url(), endpoint)

    async def execute_query(self, options: Optional[GraphQLQuery] = None, **kwargs: Any) -> GraphQLResult:
        """
        Execute a standard GraphQL query.

        Args:
            options: Query options; keyword arguments build one when omitted

        Returns:
            ``(error, data)`` tuple
        """
        options = options or GraphQLQuery(**kwargs)

        if not options.query:
            return GraphQLResult(
                GraphQLErrorInfo(code=GraphQLErrorCode.INVALID_QUERY, message="Query string is required"),
                None,
            )

        try:
            url = self.resolve_endpoint(options.endpoint)
            data = await self.client.fetch_graphql(
                url,
                options.query,
                options.variables,
                headers=options.headers,
                use_auth=options.use_auth,
                retries=options.retries,
            )
            return GraphQLResult(None, data)

        except Exception as e:
            cause = e.__cause__
            if isinstance(cause, APIError):
                logger.debug(f"GraphQL errors from {options.endpoint}: {cause.errors}")
                return GraphQLResult(
                    GraphQLErrorInfo(
                        code=GraphQLErrorCode.GQL_ERROR,
                        message=f"GraphQL errors: {cause.message}",
                        errors=cause.errors if isinstance(cause.errors, list) else [cause.errors],
                    ),
                    None,
                )

            logger.debug(f"GraphQL query failed: {e}")
            return GraphQLResult(
                GraphQLErrorInfo(code=GraphQLErrorCode.EXCEPTION, message=str(e)),
                None,
            )

    async def execute_persisted_query(self, options: Optional[PersistedQuery] = None, **kwargs: Any) -> GraphQLResult:
        """
        Execute a persisted GraphQL query.

        GraphQL servers may return partial data alongside errors, so a
        ``GQL_ERROR`` result still carries the payload's ``data``.

        Args:
            options: Persisted query options; keyword arguments build one when omitted

        Returns:
            ``(error, data)`` tuple
        """
        options = options or PersistedQuery(**kwargs)
        operation_name = options.operation_name

        if not operation_name or not options.sha256_hash:
            return GraphQLResult(
                GraphQLErrorInfo(
                    code=GraphQLErrorCode.INVALID_PERSISTED_QUERY,
                    message="operationName and sha256Hash are required",
                ),
                None,
            )

        try:
            base_url = self.get_base_url()
            if not base_url:
                raise ConfigurationError(BASE_URL_MISSING)
            url = f"{base_url}?{build_persisted_query_params(options)}"

            response = await self.client.get_json(
                url,
                headers=options.headers,
                use_auth=options.use_auth,
                retries=options.retries,
                throw_on_error=False,
                check_api_errors=False,
            )

            if response is None:
                return GraphQLResult(
                    GraphQLErrorInfo(
                        code=GraphQLErrorCode.EXCEPTION,
                        message=f"Persisted query {operation_name} returned no response",
                        operation_name=operation_name,
                    ),
                    None,
                )

            errors = response.get("errors")
            if errors:
                message = ", ".join(str(error.get("message", "")) for error in errors)
                return GraphQLResult(
                    GraphQLErrorInfo(
                        code=GraphQLErrorCode.GQL_ERROR,
                        message=message,
                        errors=errors,
                        operation_name=operation_name,
                    ),
                    response.get("data"),
                )

            return GraphQLResult(None, response.get("data"))

        except Exception as e:
            logger.debug(f"Persisted query {operation_name} failed: {e}")
            return GraphQLResult(
                GraphQLErrorInfo(
                    code=GraphQLErrorCode.EXCEPTION,
                    message=str(e),
                    operation_name=operation_name,
                ),
                None,
            )

    async def query(self, query_string: str, variables: Optional[Dict[str, Any]] = None, **options: Any) -> Any:
        """
        Run a standard query, raising instead of returning a tuple.

        Raises:
            GraphQLError: If the query fails
        """
        error, data = await self.execute_query(GraphQLQuery(query=query_string, variables=variables or {}, **options))
        if error:
            raise GraphQLError(error.message, code=error.code.value, errors=error.errors)
        return data

    async def persisted_query(
        self,
        operation_name: str,
        sha256_hash: str,
        variables: Optional[Dict[str, Any]] = None,
        **options: Any,
    ) -> Any:
        """
        Run a persisted query, raising instead of returning a tuple.

        Raises:
            GraphQLError: If the query fails
        """
        error, data = await self.execute_persisted_query(PersistedQuery(
            operation_name=operation_name,
            sha256_hash=sha256_hash,
            variables=variables or {},
            **options,
        ))
        if error:
            raise GraphQLError(
                error.message,
                code=error.code.value,
                errors=error.errors,
                operation_name=error.operation_name,
            )
        return data


def create_persisted_query(operation_name: str, sha256_hash: str, version: int = 1) -> PersistedQuery:
    """Build a reusable persisted query reference."""
    return PersistedQuery(operation_name=operation_name, sha256_hash=sha256_hash, version=version)


__all__ = [
    "GraphQLErrorCode",
    "GraphQLErrorInfo",
    "GraphQLResult",
    "GraphQLQuery",
    "PersistedQuery",
    "GraphQLClient",
    "build_persisted_query_params",
    "create_persisted_query",
    "join_url",
]

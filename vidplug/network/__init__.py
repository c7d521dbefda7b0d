"""
Network Layer - Requests with retries, convenience wrappers and GraphQL.

Data flows one way: caller -> NetworkClient / GraphQLClient / APIClient ->
RequestExecutor -> transport.
"""

from vidplug.network.transport import AiohttpTransport, BaseTransport, TransportResponse
from vidplug.network.html import HTMLParser, parse_html
from vidplug.network.request import RequestDescriptor, RequestExecutor
from vidplug.network.client import NetworkClient, build_descriptor
from vidplug.network.graphql import (
    GraphQLClient,
    GraphQLErrorCode,
    GraphQLErrorInfo,
    GraphQLQuery,
    GraphQLResult,
    PersistedQuery,
    create_persisted_query,
)
from vidplug.network.api import APIClient

__all__ = [
    # Transport
    "BaseTransport",
    "AiohttpTransport",
    "TransportResponse",
    # HTML
    "HTMLParser",
    "parse_html",
    # Requests
    "RequestDescriptor",
    "RequestExecutor",
    "NetworkClient",
    "build_descriptor",
    # GraphQL
    "GraphQLClient",
    "GraphQLErrorCode",
    "GraphQLErrorInfo",
    "GraphQLQuery",
    "GraphQLResult",
    "PersistedQuery",
    "create_persisted_query",
    # API
    "APIClient",
]

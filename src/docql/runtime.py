"""The runtime: every interaction docql has with the outside world.

The pipeline only talks to an abstract :class:`Runtime`, so the same core can
be driven by the local process (:class:`LocalRuntime`) or by any other host
that can supply a date, arguments, HTTP and file access.
"""

from __future__ import annotations

import asyncio
import datetime
import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import requests
from loguru import logger

INTROSPECTION_QUERY = """\
query IntrospectionQuery {
  __schema {
    queryType { name }
    mutationType { name }
    subscriptionType { name }
    types {
      ...FullType
    }
    directives {
      name
      description
      locations
      args {
        ...InputValue
      }
    }
  }
}

fragment FullType on __Type {
  kind
  name
  description
  fields(includeDeprecated: true) {
    name
    description
    args {
      ...InputValue
    }
    type {
      ...TypeRef
    }
    isDeprecated
    deprecationReason
  }
  inputFields {
    ...InputValue
  }
  interfaces {
    ...TypeRef
  }
  enumValues(includeDeprecated: true) {
    name
    description
    isDeprecated
    deprecationReason
  }
  possibleTypes {
    ...TypeRef
  }
}

fragment InputValue on __InputValue {
  name
  description
  type { ...TypeRef }
  defaultValue
}

fragment TypeRef on __Type {
  kind
  name
  ofType {
    kind
    name
    ofType {
      kind
      name
      ofType {
        kind
        name
        ofType {
          kind
          name
          ofType {
            kind
            name
            ofType {
              kind
              name
              ofType {
                kind
                name
              }
            }
          }
        }
      }
    }
  }
}
"""


@dataclass(frozen=True)
class GraphqlRequest:
    """A GraphQL request body."""

    query: str
    operation_name: str

    def to_json(self) -> dict[str, str]:
        return {"query": self.query, "operationName": self.operation_name}


GRAPHQL_REQUEST = GraphqlRequest(query=INTROSPECTION_QUERY, operation_name="IntrospectionQuery")


class Runtime(ABC):
    """Outside-world capabilities the pipeline depends on.

    Every operation may raise; the pipeline wraps the failure in the matching
    :mod:`docql.errors` type using ``str(exc)`` as the description.
    """

    @abstractmethod
    async def date(self) -> str:
        """Current date as an ISO 8601 calendar date (``YYYY-MM-DD``)."""

    @abstractmethod
    async def get_args(self) -> list[str]:
        """Command-line arguments, without the program name."""

    @abstractmethod
    async def query(self, url: str, request: GraphqlRequest, headers: dict[str, str]) -> Any:
        """POST *request* to *url* and return the decoded JSON response."""

    @abstractmethod
    async def read_file(self, path: str) -> str:
        """Read a previously saved introspection result."""

    @abstractmethod
    async def prepare_output_directory(self, output: str) -> None:
        """Make sure *output* exists and can receive files."""

    @abstractmethod
    async def write_file(self, output: str, file: str, contents: str) -> None:
        """Write *contents* to the file named *file* inside *output*."""


class LocalRuntime(Runtime):
    """Runtime for the local process: system clock, ``sys.argv``, requests, pathlib.

    Blocking calls run in worker threads so concurrent writes overlap.
    """

    def __init__(self, *, timeout_s: float = 30.0, session: requests.Session | None = None) -> None:
        self._timeout = timeout_s
        self._session = session or requests.Session()

    async def date(self) -> str:
        return datetime.date.today().isoformat()

    async def get_args(self) -> list[str]:
        return sys.argv[1:]

    async def query(self, url: str, request: GraphqlRequest, headers: dict[str, str]) -> Any:
        all_headers = {**headers, "content-type": "application/json"}
        logger.debug("POST {} ({})", url, request.operation_name)
        return await asyncio.to_thread(self._post_json, url, request.to_json(), all_headers)

    def _post_json(self, url: str, body: dict[str, str], headers: dict[str, str]) -> Any:
        response = self._session.post(url, json=body, headers=headers, timeout=self._timeout)
        response.raise_for_status()
        return response.json()

    async def read_file(self, path: str) -> str:
        return await asyncio.to_thread(Path(path).read_text, encoding="utf-8")

    async def prepare_output_directory(self, output: str) -> None:
        await asyncio.to_thread(Path(output).mkdir, parents=True, exist_ok=True)

    async def write_file(self, output: str, file: str, contents: str) -> None:
        await asyncio.to_thread((Path(output) / file).write_text, contents, encoding="utf-8")

    def close(self) -> None:
        self._session.close()

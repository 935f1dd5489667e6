"""Lifespan dependency injection bridge.

``inject`` lets the FastAPI lifespan declare ``Depends()`` parameters
just like a route handler.  Startup work that has to happen once per
process (compiling tool templates, flushing the trace exporter on
shutdown) lives in those dependencies; anything that must be installed
before the ASGI stack is built (middleware, exception handlers) belongs
in the app factory instead.

Based on https://github.com/fastapi/fastapi/discussions/11742
"""

from collections.abc import AsyncIterator
from contextlib import AsyncExitStack, asynccontextmanager
from functools import partial
from typing import Any, Callable

from fastapi import FastAPI, Request
from fastapi.dependencies.utils import get_dependant, solve_dependencies

# Synthetic request the lifespan dependencies are resolved against.
_LIFESPAN_SCOPE = {
    "type": "http",
    "http_version": "1.1",
    "method": "GET",
    "scheme": "http",
    "path": "/",
    "raw_path": b"/",
    "query_string": b"",
    "root_path": "",
    "headers": ((b"X-Request-Scope", b"lifespan"),),
    "client": ("localhost", 80),
    "server": ("localhost", 80),
}


def inject(
    lifespan: Callable[..., Any],
) -> Callable[[FastAPI], Any]:
    """Resolve ``Depends()`` parameters for a lifespan function.

    Usage::

        @inject
        async def lifespan(
            app: FastAPI,
            _tools: Annotated[None, Depends(build_tool_registry)],
        ):
            yield

    Generator dependencies run their teardown in reverse order on
    shutdown.  ``app.dependency_overrides`` is honoured.

    Raises
    ------
    RuntimeError
        A lifespan dependency could not be resolved.
    """

    @asynccontextmanager
    async def wrapper(app: FastAPI) -> AsyncIterator[None]:
        request = Request(scope={**_LIFESPAN_SCOPE, "state": app.state, "app": app})
        dependant = get_dependant(path="/", call=partial(lifespan, app))

        async with AsyncExitStack() as stack:
            solved = await solve_dependencies(
                request=request,
                dependant=dependant,
                async_exit_stack=stack,
                embed_body_fields=False,
                dependency_overrides_provider=app,
            )
            if solved.errors:
                raise RuntimeError(f"Lifespan dependencies failed: {solved.errors}")
            async with asynccontextmanager(lifespan)(app, **solved.values):
                yield

    return wrapper

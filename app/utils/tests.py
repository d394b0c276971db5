from typing import Optional

import httpx
from fastapi import FastAPI


def create_test_app(routers, database=None, middlewares=None) -> FastAPI:
    """
    Create a FastAPI test application with the given routers and middlewares.

    The app carries the same rate limiter and error handlers as the server
    handler, a fresh live feed, and the given Database on ``app.state``.

    Args:
        routers: The router (or list of routers) to include in the app.
        database: Optional Database handle exposed to the DI providers.
        middlewares: Optional list of (middleware_class, config_dict) tuples.

    Returns:
        FastAPI: A configured FastAPI application.

    Example:
        app = create_test_app([router1, router2], database=Database.in_memory())
    """
    from api.dependencies.errors import setup_error_handlers
    from api.dependencies.rate_limits import setup_rate_limiter
    from infrastructure.notifications.feed import FeedBroadcaster

    # Create a fresh app
    app = FastAPI()

    setup_rate_limiter(app)
    setup_error_handlers(app)

    app.state.database = database
    app.state.feed = FeedBroadcaster()

    # Add any additional middlewares
    if middlewares:
        for middleware_class, middleware_config in middlewares:
            app.add_middleware(middleware_class, **middleware_config)

    # Include the routers
    if not isinstance(routers, list):
        routers = [routers]
    for router in routers:
        app.include_router(router)

    return app


async def rate_limiting_helper(
    app,
    endpoint: str,
    request_limit: int,
    method: str = "get",
    expected_status: int = 200,
    headers: Optional[dict] = None,
    json: Optional[dict] = None,
):
    """
    Helper function to test rate limiting for an endpoint.

    Args:
        app: The FastAPI app instance.
        endpoint: The endpoint to test.
        request_limit: Number of requests allowed before rate limiting.
        method: HTTP method to use (e.g., "get", "post").
        expected_status: Expected status code for successful requests.
        headers: Optional headers to include in the requests.
        json: Optional JSON body sent with every request.
    """
    transport = httpx.ASGITransport(app=app)
    headers = headers or {}
    kwargs = {"headers": headers}
    if json is not None:
        kwargs["json"] = json

    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        http_method = getattr(client, method.lower())

        # Make requests up to the limit
        for i in range(request_limit):
            response = await http_method(endpoint, **kwargs)
            assert (
                response.status_code == expected_status
            ), f"Request {i+1} failed with status {response.status_code}"

        # The next request should be rate limited
        response = await http_method(endpoint, **kwargs)
        assert response.status_code == 429, "Expected rate limiting to trigger"
        assert response.json()["message"] == "Rate limit exceeded"

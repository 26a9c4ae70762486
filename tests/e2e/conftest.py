"""E2E test configuration and fixtures."""

import multiprocessing
import time
from typing import Generator

import httpx
import pytest
import uvicorn


def is_server_running(port: int = 8080) -> bool:
    """Check if a server is running on the specified port by checking the /health endpoint."""
    try:
        response = httpx.get(f"http://localhost:{port}/health", timeout=2)
        return response.status_code == 200
    except (httpx.RequestError, httpx.ConnectTimeout):
        return False


@pytest.fixture(scope="session")
def server_port() -> int:
    """Get the port for the test server."""
    return 8080


def run_server(port: int) -> None:
    """Run the uvicorn server in a separate process."""
    uvicorn.run("folio.app:app", host="0.0.0.0", port=port, log_level="info")


@pytest.fixture(scope="session")
def chat_server(server_port: int) -> Generator[int, None, None]:
    """Start the chat server unless one is already running.

    The server is torn down after the session.  Returns the port number
    the server is running on.
    """
    if is_server_running(server_port):
        yield server_port
        return

    process = multiprocessing.Process(target=run_server, args=(server_port,))
    process.start()

    server_started = False
    for _ in range(30):  # 30 seconds timeout
        if is_server_running(server_port):
            server_started = True
            break
        time.sleep(1)

        if not process.is_alive():
            pytest.fail("Server process crashed during startup.", pytrace=False)

    if not server_started:
        process.terminate()
        pytest.fail(
            "Chat server did not start within the timeout period.", pytrace=False
        )

    yield server_port

    process.terminate()
    process.join(timeout=10)
    if process.is_alive():
        process.kill()
        process.join()


@pytest.fixture
def base_url(chat_server: int) -> str:
    """Base URL for the chat API."""
    return f"http://localhost:{chat_server}"

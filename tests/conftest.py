from __future__ import annotations

import threading
from http.server import ThreadingHTTPServer

import pytest

from gitinspect.config import CompletionConfig, GitInspectConfig
from gitinspect.models import RepositoryMetadata
from tests._fixtures.fakes import TricklingHandler, make_metadata


@pytest.fixture
def trickling_server():
    """Local server whose JSON body takes about five seconds to arrive."""
    server = ThreadingHTTPServer(("127.0.0.1", 0), TricklingHandler)
    server.daemon_threads = True
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    host, port = server.server_address[:2]
    try:
        yield f"http://{host}:{port}"
    finally:
        server.shutdown()
        server.server_close()


@pytest.fixture
def metadata() -> RepositoryMetadata:
    """Metadata for the canonical octocat/Hello-World repository."""
    return make_metadata()


@pytest.fixture
def config() -> GitInspectConfig:
    """Configuration with a credential so analysis can proceed."""
    return GitInspectConfig(llm=CompletionConfig(api_key="test-key"))

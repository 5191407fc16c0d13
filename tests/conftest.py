import socket

import pytest

from script_deployer.deploy_logger import get_logger
from tests.fake_server import FakeScriptServer


@pytest.fixture
def server():
    fake = FakeScriptServer().start()
    yield fake
    fake.stop()


@pytest.fixture
def logger():
    return get_logger(name="test_deployer", log_level="DEBUG", console_output=False)


@pytest.fixture
def script_file(tmp_path):
    path = tmp_path / "file.js"
    path.write_text("console.log(1)", encoding="utf-8")
    return path


@pytest.fixture
def closed_port_url():
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(('127.0.0.1', 0))
    port = sock.getsockname()[1]
    sock.close()
    return f"http://127.0.0.1:{port}"

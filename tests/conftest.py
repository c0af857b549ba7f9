import pytest
from graphql import build_schema

from schema_catalog.config_proxy import get_settings_proxy
from schema_catalog.sources import InputSourceContext


@pytest.fixture(autouse=True)
def reset_settings_proxy():
    proxy = get_settings_proxy()
    proxy.reset()
    yield
    proxy.reset()


@pytest.fixture
def context(tmp_path):
    return InputSourceContext(project_root=tmp_path)


@pytest.fixture
def sdl_v1():
    return "type Query { hello: String }\ntype User { id: ID! name: String! }\n"


@pytest.fixture
def sdl_v2():
    return (
        "type Query { hello: String world: String }\n"
        "type User { id: ID! name: String! email: String }\n"
    )


@pytest.fixture
def schema_v1(sdl_v1):
    return build_schema(sdl_v1)


@pytest.fixture
def schema_v2(sdl_v2):
    return build_schema(sdl_v2)

# Copyright 2025 Softwell S.r.l.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Tests for RequestContext, page rendering and RestController."""

import pytest

from genro_rest import (
    FilePageRenderer,
    HandlerRegistry,
    PageRenderer,
    PathResolver,
    RenderMissing,
    RequestContext,
    ResolutionNotFound,
    RestController,
)
from genro_rest.core.context import ViewLocator
from genro_rest.serializers import JSON_SERIALIZER, Serializer


class UpperJson(Serializer):
    content_type = "application/json"

    def serialize(self, obj):
        return str(obj).upper()


class RecordingRenderer(PageRenderer):
    def __init__(self):
        self.calls = []

    def render(self, context, view):
        self.calls.append(view)
        return f"<{view}>"


def make_context(path="/sessions/1/users/2", **kwargs):
    return RequestContext(PathResolver().parse(path), **kwargs)


class TestParams:
    def test_attributes_override_query(self):
        ctx = make_context(query={"a": "1", "b": "q"}, attributes={"b": "attr"})
        assert ctx.get_param("a") == "1"
        assert ctx.get_param("b") == "attr"
        assert ctx.get_param("missing", "dflt") == "dflt"

    def test_put_param_visible_to_later_reads(self):
        ctx = make_context(query={"a": "1"})
        ctx.put_param("a", 2)
        ctx.put_param("user", {"id": 2})
        assert ctx.get_param("a") == 2
        assert ctx.params["user"] == {"id": 2}

    def test_params_view_is_read_only(self):
        ctx = make_context(query={"a": "1"})
        with pytest.raises(TypeError):
            ctx.params["a"] = "x"  # type: ignore[index]

    def test_string_param(self):
        ctx = make_context(query={"name": "acme", "count": 3})
        assert ctx.get_string_param("name") == "acme"
        assert ctx.get_string_param("missing") is None
        with pytest.raises(TypeError):
            ctx.get_string_param("count")

    def test_contexts_do_not_share_params(self):
        first = make_context()
        second = make_context()
        first.put_param("x", 1)
        assert second.get_param("x") is None


class TestResources:
    def test_identifier_accessors(self):
        ctx = make_context()
        assert ctx.resource == "users"
        assert ctx.get_id() == "2"
        assert ctx.get_id("sessions") == "1"
        assert ctx.get_id("orders") is None
        assert ctx.get_id_at(0) == "1"

    def test_extension_defaults(self):
        assert make_context("/sessions/1.json").extension == "json"
        assert make_context("/sessions/1").extension == ""
        assert make_context("/sessions/1.json", extension="xml").extension == "xml"

    def test_content_type_from_extension(self):
        assert make_context("/sessions/1.json").content_type == "application/json"
        assert make_context("/sessions/1").content_type is None

    def test_method_upper_cased(self):
        assert make_context(method="post").method == "POST"


class TestRequestData:
    def test_headers_case_insensitive(self):
        ctx = make_context(headers={"Content-Type": "text/xml"})
        assert ctx.header("content-type") == "text/xml"
        assert ctx.header("x-missing") is None

    def test_remote_address_prefers_forwarded_headers(self):
        ctx = make_context(headers={"X-Forwarded-For": "10.0.0.1"}, remote_addr="127.0.0.1")
        assert ctx.remote_address() == "http://10.0.0.1"
        ctx = make_context(headers={"X_FORWARDED_FOR": "10.0.0.2"}, scheme="https")
        assert ctx.remote_address() == "https://10.0.0.2"
        ctx = make_context(remote_addr="127.0.0.1")
        assert ctx.remote_address() == "http://127.0.0.1"


class TestOutput:
    def test_render_page_defaults(self):
        renderer = RecordingRenderer()
        ctx = make_context("/sessions/1", action="show", renderer=renderer)
        assert ctx.render_page() == "<sessions/show>"
        assert ctx.render_page("edit") == "<sessions/edit>"
        assert ctx.render_page("list", resource="users") == "<users/list>"
        assert ctx.render_page("home", resource="") == "<home>"

    def test_render_page_without_action_or_resource(self):
        renderer = RecordingRenderer()
        ctx = make_context("/", renderer=renderer)
        assert ctx.render_page() == "<index>"

    def test_render_page_without_renderer(self):
        ctx = make_context("/sessions/1", action="show")
        with pytest.raises(RenderMissing) as exc_info:
            ctx.render_page()
        assert exc_info.value.page == "sessions/show"

    def test_renders_page_when_no_serializer(self):
        assert make_context().renders_page
        assert not make_context(serializer=JSON_SERIALIZER).renders_page

    def test_serialize_uses_registered_serializer(self):
        registry = HandlerRegistry({JSON_SERIALIZER: UpperJson})
        ctx = make_context(serializer=JSON_SERIALIZER, registry=registry)
        assert ctx.serialize("abc") == "ABC"

    def test_serialize_without_serializer(self):
        ctx = make_context(registry=HandlerRegistry())
        with pytest.raises(ResolutionNotFound):
            ctx.serialize({})

    def test_serialize_unregistered_serializer(self):
        ctx = make_context(serializer=JSON_SERIALIZER, registry=HandlerRegistry())
        with pytest.raises(ResolutionNotFound):
            ctx.serialize({})


class TestFileRenderer:
    @pytest.fixture
    def views(self, tmp_path):
        (tmp_path / "sessions").mkdir()
        (tmp_path / "sessions" / "show.html").write_text("session page", encoding="utf-8")
        (tmp_path / "sessions" / "list.htm").write_text("legacy list", encoding="utf-8")
        (tmp_path / "sessions" / "raw.txt").write_text("raw", encoding="utf-8")
        return tmp_path

    def test_extensions_tried_in_order(self, views):
        locator = ViewLocator(views)
        assert locator.locate("sessions/show").name == "show.html"
        assert locator.locate("sessions/list").name == "list.htm"
        assert locator.locate("sessions/raw.txt").name == "raw.txt"

    @pytest.mark.parametrize("view", ["sessions/missing", "sessions/missing.txt", "", "../etc/passwd"])
    def test_missing_views(self, views, view):
        with pytest.raises(RenderMissing):
            ViewLocator(views).locate(view)

    def test_renderer_returns_file_text(self, views):
        ctx = make_context("/sessions/1", action="show", renderer=FilePageRenderer(views))
        assert ctx.render_page() == "session page"

    def test_render_missing_is_an_os_error(self, views):
        ctx = make_context("/sessions/1", action="edit", renderer=FilePageRenderer(views))
        with pytest.raises(OSError):
            ctx.render_page()


class TestRestController:
    def test_unbound_controller(self):
        with pytest.raises(RuntimeError):
            RestController().get_id()

    def test_controller_delegates_to_context(self):
        renderer = RecordingRenderer()
        registry = HandlerRegistry({JSON_SERIALIZER: UpperJson})
        ctx = make_context(
            "/sessions/1/users/2.json",
            action="show",
            query={"q": "x"},
            serializer=JSON_SERIALIZER,
            registry=registry,
            renderer=renderer,
            remote_addr="1.2.3.4",
        )
        controller = RestController().bind(ctx)
        assert controller.context is ctx
        assert controller.get_id() == "2"
        assert controller.get_id("session") == "1"
        assert controller.get_id_at(0) == "1"
        assert controller.get_param("q") == "x"
        assert controller.get_string_param("q") == "x"
        controller.put_param("user", "bob")
        assert controller.params["user"] == "bob"
        assert controller.extension == "json"
        assert controller.serializer == JSON_SERIALIZER
        assert controller.serialize("ok") == "OK"
        assert controller.render_page() == "<users/show>"
        assert controller.remote_address() == "http://1.2.3.4"

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

"""Tests for SerializerFinder and the content-type table."""

from concurrent.futures import ThreadPoolExecutor

import pytest

from genro_rest import HandlerRegistry, RestConfig, SerializerFinder
from genro_rest.core.serializer_finder import (
    CONTENT_TYPES,
    EXTENSION_MAPPING,
    builtin_serializer,
    get_content_type,
    get_extension,
)
from genro_rest.serializers import (
    BASE64_SERIALIZER,
    FILE_SERIALIZER,
    JSON_SERIALIZER,
    XML_SERIALIZER,
)


class Custom:
    pass


@pytest.fixture
def config():
    return RestConfig(main_package="shop.api", alias_serializers_package="shop.custom")


class TestContentTypes:
    def test_known_content_types(self):
        assert get_extension("application/json") == "json"
        assert get_extension("text/xml") == "xml"

    def test_unknown_content_type_is_none(self):
        assert get_extension("text/plain") is None
        assert get_extension(None) is None
        assert get_extension("") is None

    def test_parameters_and_case_ignored(self):
        assert get_extension("Application/JSON; charset=utf-8") == "json"

    def test_octet_stream_keeps_last_registration(self):
        assert get_extension("application/octet-stream") == "file"

    def test_reverse_lookup_is_lossless(self):
        assert get_content_type("json") == "application/json"
        assert get_content_type("XML") == "text/xml"
        assert get_content_type("base64") == "application/octet-stream"
        assert get_content_type("file") == "application/octet-stream"
        assert get_content_type("csv") is None
        assert get_content_type("") is None

    def test_table_is_read_only(self):
        with pytest.raises(TypeError):
            EXTENSION_MAPPING["text/csv"] = "csv"  # type: ignore[index]
        with pytest.raises(TypeError):
            CONTENT_TYPES["csv"] = "text/csv"  # type: ignore[index]

    def test_concurrent_readers_see_full_table(self):
        def read(_):
            result = get_extension("application/json")
            return result, dict(EXTENSION_MAPPING)

        with ThreadPoolExecutor(max_workers=8) as pool:
            outcomes = list(pool.map(read, range(64)))
        for result, table in outcomes:
            assert result == "json"
            assert table == {
                "application/json": "json",
                "text/xml": "xml",
                "application/octet-stream": "file",
            }
            assert set(CONTENT_TYPES) == {"json", "xml", "base64", "file"}


class TestBuiltins:
    @pytest.mark.parametrize(
        "extension, identifier",
        [
            ("json", JSON_SERIALIZER),
            ("JSON", JSON_SERIALIZER),
            ("xml", XML_SERIALIZER),
            ("base64", BASE64_SERIALIZER),
            ("file", FILE_SERIALIZER),
        ],
    )
    def test_builtin_identifiers(self, extension, identifier):
        assert builtin_serializer(extension) == identifier

    @pytest.mark.parametrize("extension", ["csv", "page", "", None])
    def test_no_builtin(self, extension):
        assert builtin_serializer(extension) is None


class TestSerializerFinder:
    def test_json_without_custom_uses_builtin(self, config):
        finder = SerializerFinder(HandlerRegistry(), "json", config)
        assert finder.resolve("sessions") == JSON_SERIALIZER

    def test_unknown_extension_without_custom_is_none(self, config):
        finder = SerializerFinder(HandlerRegistry(), "csv", config)
        assert finder.resolve("sessions") is None

    def test_missing_extension_means_page(self, config):
        finder = SerializerFinder(HandlerRegistry(), None, config)
        assert finder.extension == "page"
        assert finder.resolve("sessions") is None
        assert finder.candidates("sessions")[-1] == "shop.api.PageSessionSerializer"

    def test_custom_wins_over_builtin(self, config):
        registry = HandlerRegistry({"shop.api.JsonSessionSerializer": Custom})
        finder = SerializerFinder(registry, "json", config)
        assert finder.resolve("sessions") == "shop.api.JsonSessionSerializer"

    def test_alias_wins_over_main(self, config):
        registry = HandlerRegistry(
            {
                "shop.api.JsonSessionSerializer": Custom,
                "shop.custom.JsonSessionSerializer": Custom,
            }
        )
        finder = SerializerFinder(registry, "json", config)
        assert finder.resolve("sessions") == "shop.custom.JsonSessionSerializer"

    def test_custom_serializer_for_unknown_extension(self, config):
        registry = HandlerRegistry({"shop.api.CsvSessionSerializer": Custom})
        finder = SerializerFinder(registry, "csv", config)
        assert finder.resolve("sessions") == "shop.api.CsvSessionSerializer"

    def test_nested_style(self):
        config = RestConfig(main_package="shop.api", package_style="nested")
        registry = HandlerRegistry({"shop.api.sessions.XmlSessionSerializer": Custom})
        finder = SerializerFinder(registry, "xml", config)
        assert finder.candidates("sessions") == ["shop.api.sessions.XmlSessionSerializer"]
        assert finder.resolve("sessions") == "shop.api.sessions.XmlSessionSerializer"

    def test_without_config_only_builtins(self):
        registry = HandlerRegistry({"shop.api.JsonSessionSerializer": Custom})
        assert SerializerFinder(registry, "json").resolve("sessions") == JSON_SERIALIZER
        assert SerializerFinder(registry, "csv").resolve("sessions") is None
        assert SerializerFinder(registry).resolve("sessions") is None

    def test_extension_case_insensitive_for_builtins(self, config):
        finder = SerializerFinder(HandlerRegistry(), "Xml", config)
        assert finder.is_builtin
        assert finder.resolve("sessions") == XML_SERIALIZER

    def test_suffix_from_config(self):
        config = RestConfig(main_package="shop.api", suffix_serializer="Renderer")
        finder = SerializerFinder(HandlerRegistry(), "json", config)
        assert finder.candidates("orders") == ["shop.api.JsonOrderRenderer"]

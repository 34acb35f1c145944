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

"""Tests for HandlerRegistry."""

import pytest

from genro_rest import HandlerRegistry, ResolutionNotFound


class SessionController:
    def __init__(self, label="default"):
        self.label = label


def test_register_with_explicit_identifier():
    registry = HandlerRegistry()
    registry.register(SessionController, "shop.api.SessionController")
    assert registry.exists("shop.api.SessionController")
    assert "shop.api.SessionController" in registry
    assert registry.get("shop.api.SessionController") is SessionController
    assert len(registry) == 1


def test_register_defaults_to_module_and_qualname():
    registry = HandlerRegistry()
    registry.register(SessionController)
    assert registry.identifiers() == [f"{__name__}.SessionController"]


def test_handler_decorator_returns_class_unchanged():
    registry = HandlerRegistry()

    @registry.handler("shop.api.UserController")
    class UserController:
        pass

    assert registry.get("shop.api.UserController") is UserController


def test_collision_requires_replace():
    registry = HandlerRegistry()
    registry.register(SessionController, "shop.api.SessionController")
    # same factory again is harmless
    registry.register(SessionController, "shop.api.SessionController")

    class Other:
        pass

    with pytest.raises(ValueError, match="already registered"):
        registry.register(Other, "shop.api.SessionController")
    registry.register(Other, "shop.api.SessionController", replace=True)
    assert registry.get("shop.api.SessionController") is Other


def test_register_rejects_non_callables():
    with pytest.raises(TypeError):
        HandlerRegistry().register("not callable", "x.Y")


def test_exists_handles_missing_and_empty_identifiers():
    registry = HandlerRegistry()
    assert registry.exists("shop.api.Missing") is False
    assert registry.exists(None) is False
    assert registry.exists("") is False


def test_instantiate_passes_arguments():
    registry = HandlerRegistry({"shop.api.SessionController": SessionController})
    instance = registry.instantiate("shop.api.SessionController", label="acme")
    assert isinstance(instance, SessionController)
    assert instance.label == "acme"


def test_instantiate_unknown_identifier_raises_not_found():
    with pytest.raises(ResolutionNotFound) as exc_info:
        HandlerRegistry().instantiate("shop.api.Missing")
    assert exc_info.value.selector == "shop.api.Missing"


def test_iteration_is_sorted():
    registry = HandlerRegistry({"b.B": SessionController, "a.A": SessionController})
    assert list(registry) == ["a.A", "b.B"]
    assert repr(registry) == "HandlerRegistry(2 handlers)"

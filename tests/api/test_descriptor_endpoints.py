from __future__ import annotations

import pytest
from fastapi import HTTPException

from api import main
from api.main import RegisterDescriptorRequest, RegisterEngineRequest
from domain.descriptor import DescriptorKind
from infrastructure.registry.in_memory_descriptor_registry import InMemoryDescriptorRegistry


class FakeLogger:
    def __init__(self, bound: dict[str, object] | None = None, events: list[dict[str, object]] | None = None) -> None:
        self.bound = bound or {}
        self.events = [] if events is None else events

    def bind(self, **fields: object) -> "FakeLogger":
        merged = dict(self.bound)
        merged.update(fields)
        return FakeLogger(bound=merged, events=self.events)

    def info(self, event: str, **fields: object) -> None:
        payload = dict(self.bound)
        payload.update(fields)
        payload["type"] = event
        self.events.append(payload)

    def debug(self, event: str, **fields: object) -> None:
        self.info(event, **fields)

    def warning(self, event: str, **fields: object) -> None:
        self.info(event, **fields)

    def error(self, event: str, **fields: object) -> None:
        self.info(event, **fields)


@pytest.fixture(autouse=True)
def captured(monkeypatch) -> list[dict[str, object]]:
    monkeypatch.setattr(main, "DESCRIPTOR_REGISTRY", InMemoryDescriptorRegistry())
    events: list[dict[str, object]] = []
    monkeypatch.setattr(main, "_build_logger", lambda: FakeLogger(events=events))
    return events


def _register_engine(engine_id: str = "demo-engine"):
    return main.register_engine(RegisterEngineRequest(engine_id=engine_id))


def test_register_engine(captured) -> None:
    # Act
    response = _register_engine()

    # Assert
    assert response.unique_id == "engine:[demo-engine]"
    assert response.kind == DescriptorKind.ENGINE
    assert response.display_name == "demo-engine"
    assert response.engine_id == "demo-engine"
    registered = [event for event in captured if event["type"] == "descriptor.registered"]
    assert len(registered) == 1
    assert registered[0]["unique_id"] == "engine:[demo-engine]"


def test_register_engine_twice_returns_409(captured) -> None:
    _register_engine()

    with pytest.raises(HTTPException) as exc_info:
        _register_engine()

    assert exc_info.value.status_code == 409
    assert captured[-1]["type"] == "descriptor.register_failed"
    assert captured[-1]["engine_id"] == "demo-engine"


def test_register_blank_engine_returns_400() -> None:
    with pytest.raises(HTTPException) as exc_info:
        main.register_engine(RegisterEngineRequest(engine_id=" "))

    assert exc_info.value.status_code == 400


def test_register_descriptor_and_lookup() -> None:
    # Arrange
    _register_engine()
    container = main.register_descriptor(
        RegisterDescriptorRequest(
            parent_id="engine:[demo-engine]",
            segment_type="class",
            value="com.example.Foo",
            kind=DescriptorKind.CONTAINER,
        )
    )

    # Act
    method = main.register_descriptor(
        RegisterDescriptorRequest(
            parent_id=container.unique_id,
            segment_type="method",
            value="bar()",
            display_name="bar",
        )
    )
    found = main.get_descriptor(method.unique_id)
    children = main.get_descriptor_children(container.unique_id)

    # Assert
    assert method.unique_id == "engine:[demo-engine]/class:[com.example.Foo]/method:[bar()]"
    assert method.kind == DescriptorKind.TEST
    assert found == method
    assert children == [method]


def test_register_descriptor_with_unknown_parent_returns_404() -> None:
    with pytest.raises(HTTPException) as exc_info:
        main.register_descriptor(
            RegisterDescriptorRequest(parent_id="engine:[missing]", segment_type="class", value="Foo")
        )

    assert exc_info.value.status_code == 404


def test_register_descriptor_with_malformed_parent_returns_400() -> None:
    with pytest.raises(HTTPException) as exc_info:
        main.register_descriptor(
            RegisterDescriptorRequest(parent_id="engine:missing", segment_type="class", value="Foo")
        )

    assert exc_info.value.status_code == 400


def test_get_unknown_descriptor_returns_404(captured) -> None:
    with pytest.raises(HTTPException) as exc_info:
        main.get_descriptor("engine:[missing]")

    assert exc_info.value.status_code == 404
    failures = [event for event in captured if event["type"] == "descriptor.lookup_failed"]
    assert len(failures) == 1
    assert "engine:[missing]" in failures[0]["error"]


def test_children_of_malformed_id_returns_400() -> None:
    with pytest.raises(HTTPException) as exc_info:
        main.get_descriptor_children("engine:[x]/")

    assert exc_info.value.status_code == 400

"""Tests for bounded multi-pass rendering."""

from __future__ import annotations

import logging
import typing as typ

from conftest import RecordingBackend

from folio.model import build_store
from folio.render.options import RenderOptions
from folio.render.orchestrator import TwoPassOrchestrator
from folio.render.registry import AnchorRegistry

if typ.TYPE_CHECKING:
    from pathlib import Path

    import pytest

    from folio.model.entities import DocumentationStore


class BackendFactory:
    """Create recording backends and remember every one handed out."""

    def __init__(self) -> None:
        self.created: list[RecordingBackend] = []

    def __call__(self) -> RecordingBackend:
        backend = RecordingBackend()
        self.created.append(backend)
        return backend


def test_store_without_forward_references_needs_one_pass() -> None:
    store = build_store(
        {"pages": [{"name": "README", "body": "Plain text only."}]}
    )
    factory = BackendFactory()
    result = TwoPassOrchestrator(store, factory).generate()
    assert result.passes == 1
    assert result.complete
    assert len(factory.created) == 1
    assert result.backend is factory.created[0]


def test_forward_references_trigger_second_pass(
    sample_store: DocumentationStore,
) -> None:
    """The overview and README point forward, so a second pass is needed."""
    factory = BackendFactory()
    result = TwoPassOrchestrator(sample_store, factory).generate()
    assert result.passes == 2
    assert result.complete
    assert result.unresolved == []

    first, final = factory.created
    assert first.texts("paragraph")[1] == (
        "Start with Shapes::Widget (p. ???) and draw."
    )
    page = final.destinations["classmod-Shapes::Widget"]
    assert final.texts("paragraph")[1] == (
        f"Start with Shapes::Widget [p. {page}] and draw."
    )
    assert result.backend is final


def test_pass_limit_reports_unplaced_references(
    sample_store: DocumentationStore, caplog: pytest.LogCaptureFixture
) -> None:
    options = RenderOptions(max_passes=1)
    with caplog.at_level(logging.WARNING, logger="folio.render.orchestrator"):
        result = TwoPassOrchestrator(
            sample_store, BackendFactory(), options
        ).generate()
    assert result.passes == 1
    assert not result.complete
    assert "classmod-Shapes::Widget" in result.unresolved
    assert "unresolved page references after 1 passes" in caplog.text


def test_registry_is_shared_between_passes(sample_store: DocumentationStore) -> None:
    registry = AnchorRegistry()
    orchestrator = TwoPassOrchestrator(
        sample_store, BackendFactory(), registry=registry
    )
    orchestrator.generate()
    assert registry.lookup("toplevel-CHANGELOG") == 1
    assert registry.lookup("method-Shapes::Widget-#draw") is not None
    assert registry.unresolved == []


def test_final_document_is_saved(
    sample_store: DocumentationStore, tmp_path: Path
) -> None:
    output = tmp_path / "out" / "Documentation.pdf"
    result = TwoPassOrchestrator(sample_store, BackendFactory()).generate(output)
    assert result.path == output
    assert output.read_bytes().startswith(b"%PDF")
    assert typ.cast("RecordingBackend", result.backend).saved == output


def test_not_saved_without_output(sample_store: DocumentationStore) -> None:
    result = TwoPassOrchestrator(sample_store, BackendFactory()).generate()
    assert result.path is None
    assert typ.cast("RecordingBackend", result.backend).saved is None

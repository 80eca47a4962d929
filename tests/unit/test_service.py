"""End-to-end tests for DocumentQAService on fake ports."""

from __future__ import annotations

import threading
import time
from unittest.mock import MagicMock, patch

import pytest

from docchat.config import Settings
from docchat.errors import DownstreamTimeout, EmptyStore, ExtractionFailure, ModelUnavailable
from docchat.ingestion.embedder import EmbeddingPort
from docchat.service import DocumentQAService


@pytest.fixture()
def config() -> Settings:
    return Settings(chunk_size=1000, top_k=2, llm_max_tokens=300, embedding_concurrency=2)


@pytest.fixture()
def service(fake_embedder, fake_chat, config) -> DocumentQAService:
    return DocumentQAService(fake_embedder, fake_chat, config=config)


def _text_doc(*pages: str) -> bytes:
    return "\f".join(pages).encode()


class ScriptedEmbedder(EmbeddingPort):
    """Bag-of-letters embedder that can pause or fail on chosen texts."""

    def __init__(self, *, gate_on: str | None = None, fail_on: str | None = None) -> None:
        self.gate_on = gate_on
        self.fail_on = fail_on
        self.entered = threading.Event()
        self.release = threading.Event()
        self.calls: list[str] = []
        self._lock = threading.Lock()

    @property
    def ready(self) -> bool:
        return True

    def embed(self, text: str) -> list[float]:
        with self._lock:
            self.calls.append(text)
        if self.fail_on is not None and self.fail_on in text:
            raise RuntimeError(f"cannot embed {text!r}")
        if self.gate_on is not None and self.gate_on in text:
            self.entered.set()
            self.release.wait(timeout=5)
        lowered = text.lower()
        return [float(lowered.count(letter)) for letter in "abcdefgh"]


class TestUpload:
    def test_upload_reports_chunk_count(self, service: DocumentQAService) -> None:
        result = service.upload(_text_doc("A" * 1500, "B" * 500), "doc.txt")
        assert result.chunk_count == 3
        assert result.page_count == 2
        assert result.filename == "doc.txt"
        assert service.chunk_count == 3

    def test_upload_replaces_previous_document(self, service: DocumentQAService) -> None:
        service.upload(_text_doc("first document"), "one.txt")
        service.upload(_text_doc("second", "document"), "two.txt")
        assert [c.text for c in service.store.chunks] == ["second", "document"]

    def test_upload_before_model_ready(self, service: DocumentQAService, fake_embedder) -> None:
        fake_embedder.set_ready(False)
        with pytest.raises(ModelUnavailable):
            service.upload(_text_doc("text"), "doc.txt")

    def test_document_without_text_rejected(self, service: DocumentQAService) -> None:
        with pytest.raises(ExtractionFailure, match="No extractable text"):
            service.upload(b" \f \n ", "blank.txt")

    def test_failed_upload_keeps_previous_index(self, service: DocumentQAService) -> None:
        service.upload(_text_doc("good document"), "good.txt")
        before = service.store

        with pytest.raises(ExtractionFailure):
            service.upload(b"\x00", "bad.exe")
        with patch(
            "docchat.service.index_pages",
            side_effect=DownstreamTimeout("embedding timed out"),
        ):
            with pytest.raises(DownstreamTimeout):
                service.upload(_text_doc("new"), "new.txt")

        assert service.store is before
        assert [c.text for c in service.store.chunks] == ["good document"]

    def test_reset_drops_document(self, service: DocumentQAService) -> None:
        service.upload(_text_doc("text"), "doc.txt")
        service.reset()
        assert service.chunk_count == 0
        with pytest.raises(EmptyStore):
            service.ask("anything")


class TestAsk:
    def test_ask_before_upload(self, service: DocumentQAService) -> None:
        with pytest.raises(EmptyStore) as info:
            service.ask("What is this?")
        assert info.value.to_dict() == {"code": "empty_store", "message": "No document uploaded yet"}

    def test_ask_returns_cited_answer(self, service: DocumentQAService, fake_embedder, fake_chat) -> None:
        fake_embedder.vectors["Tell me about apples"] = [1.0] + [0.0] * 7
        service.upload(_text_doc("apples are red", "bananas are yellow", "grapes"), "fruit.txt")

        result = service.ask("Tell me about apples")

        assert result.answer == "The answer."
        assert len(result.citations) == 2
        assert result.citations[0].preview.endswith("...")
        assert fake_chat.calls[0]["max_tokens"] == 300

    def test_ask_model_unavailable(self, service: DocumentQAService, fake_embedder) -> None:
        service.upload(_text_doc("text"), "doc.txt")
        fake_embedder.set_ready(False)
        with pytest.raises(ModelUnavailable):
            service.ask("question")

    def test_ready_reflects_embedder(self, service: DocumentQAService, fake_embedder) -> None:
        assert service.ready is True
        fake_embedder.set_ready(False)
        assert service.ready is False

    def test_start_without_warmup_support(self, service: DocumentQAService) -> None:
        service.start()  # fake embedder has no start(); must be a no-op
        assert service.ready is True


class TestConcurrency:
    def test_query_sees_previous_index_while_upload_runs(self, fake_chat, config) -> None:
        embedder = ScriptedEmbedder(gate_on="new doc")
        service = DocumentQAService(embedder, fake_chat, config=config)
        service.upload(_text_doc("abc old doc"), "old.txt")

        worker = threading.Thread(target=service.upload, args=(_text_doc("new doc"), "new.txt"))
        worker.start()
        try:
            assert embedder.entered.wait(timeout=5)
            during = service.ask("abc")
            assert [c.preview for c in during.citations] == ["abc old doc..."]
        finally:
            embedder.release.set()
            worker.join(timeout=5)

        assert [c.text for c in service.store.chunks] == ["new doc"]
        after = service.ask("abc")
        assert [c.preview for c in after.citations] == ["new doc..."]

    def test_embedding_failure_keeps_previous_store(self, fake_chat, config) -> None:
        embedder = ScriptedEmbedder(fail_on="broken")
        service = DocumentQAService(embedder, fake_chat, config=config)
        service.upload(_text_doc("good document"), "good.txt")
        before = service.store

        with pytest.raises(RuntimeError, match="cannot embed"):
            service.upload(_text_doc("fine page", "broken page", "last page"), "bad.txt")

        assert service.store is before
        assert [c.text for c in service.store.chunks] == ["good document"]

    def test_concurrent_uploads_do_not_interleave(self, fake_chat, config) -> None:
        embedder = ScriptedEmbedder(gate_on="aaa-1")
        service = DocumentQAService(embedder, fake_chat, config=config)
        first = threading.Thread(
            target=service.upload, args=(_text_doc("aaa-1", "aaa-2", "aaa-3"), "a.txt")
        )
        second = threading.Thread(
            target=service.upload, args=(_text_doc("bbb-1", "bbb-2", "bbb-3"), "b.txt")
        )

        first.start()
        try:
            assert embedder.entered.wait(timeout=5)
            second.start()
            time.sleep(0.1)
            assert not any(text.startswith("bbb") for text in embedder.calls)
        finally:
            embedder.release.set()
            first.join(timeout=5)
            second.join(timeout=5)

        assert [text[:3] for text in embedder.calls] == ["aaa"] * 3 + ["bbb"] * 3
        assert [c.text for c in service.store.chunks] == ["bbb-1", "bbb-2", "bbb-3"]


class TestDefaults:
    @patch("docchat.service.OpenAIChatModel")
    @patch("docchat.service.HuggingFaceEmbedder")
    def test_default_ports_built_from_config(
        self, mock_embedder_cls: MagicMock, mock_chat_cls: MagicMock, config: Settings
    ) -> None:
        service = DocumentQAService(config=config)

        mock_embedder_cls.assert_called_once_with(config.embedding_model)
        assert service.embedder is mock_embedder_cls.return_value
        assert service.llm is mock_chat_cls.return_value

    @patch("docchat.service.OpenAIChatModel")
    @patch("docchat.service.HuggingFaceEmbedder")
    def test_start_warms_up_default_embedder(
        self, mock_embedder_cls: MagicMock, _mock_chat_cls: MagicMock, config: Settings
    ) -> None:
        DocumentQAService(config=config).start()
        mock_embedder_cls.return_value.start.assert_called_once_with()

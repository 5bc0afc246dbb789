"""Tests for the recognition service that wires extractor, catalog and matcher."""

from concurrent.futures import ThreadPoolExecutor
from unittest.mock import MagicMock

import pytest

from catalog import PaintingNotFound
from extractor import ExtractionError, ExtractorNotReady, FeatureExtractor
from matcher import Match, NoMatch, RecognitionService

from conftest import mean_color_model


@pytest.fixture
def service(extractor, catalog):
    return RecognitionService(extractor, catalog, threshold=0.6)


@pytest.fixture
def red_painting(service, catalog, red_image):
    entry = catalog.add_painting("Red Study", "Anon")
    return service.add_features(entry.id, red_image)


class TestRecognitionService:

    def test_add_features_stores_vector(self, red_painting):
        assert red_painting.features is not None
        assert len(red_painting.features) == 3

    def test_add_features_unknown_painting(self, service, red_image):
        with pytest.raises(PaintingNotFound):
            service.add_features(123, red_image)

    def test_recognizes_same_image(self, service, catalog, red_painting, red_image):
        result = service.recognize(red_image)
        assert isinstance(result, Match)
        assert result.entry.id == red_painting.id
        assert result.score == pytest.approx(1.0, abs=1e-5)
        assert catalog.get(red_painting.id).metadata["view_count"] == 1
        assert catalog.recognition_log()[0]["success"] == 1

    def test_different_image_not_recognized(self, service, catalog, red_painting, blue_image):
        result = service.recognize(blue_image)
        assert isinstance(result, NoMatch)
        assert 0.0 < result.score < 0.6
        assert catalog.get(red_painting.id).metadata["view_count"] == 0
        log = catalog.recognition_log()
        assert log[0]["painting_id"] is None
        assert log[0]["success"] == 0

    def test_empty_catalog(self, service, red_image):
        assert service.recognize(red_image) == NoMatch(score=0.0)

    def test_unprocessed_paintings_ignored(self, service, catalog, red_image):
        catalog.add_painting("Pending", "Anon")
        assert service.recognize(red_image) == NoMatch(score=0.0)

    def test_extractor_not_ready_propagates(self, catalog, red_image):
        ext = FeatureExtractor("test://model", loader=mean_color_model)
        service = RecognitionService(ext, catalog, threshold=0.6)
        with pytest.raises(ExtractorNotReady):
            service.recognize(red_image)

    def test_bad_image_propagates(self, service):
        with pytest.raises(ExtractionError):
            service.recognize(b"nope")

    def test_background_updates(self, extractor, catalog, red_image):
        executor = ThreadPoolExecutor(max_workers=1)
        service = RecognitionService(extractor, catalog, threshold=0.6, executor=executor)
        entry = catalog.add_painting("Red Study", "Anon", features=extractor.extract(red_image))

        assert isinstance(service.recognize(red_image), Match)
        executor.shutdown(wait=True)
        assert catalog.get(entry.id).metadata["view_count"] == 1

    def test_background_failure_does_not_change_result(self, extractor, red_image):
        catalog = MagicMock()
        catalog.list_entries_with_features.return_value = []
        catalog.log_recognition.side_effect = RuntimeError("disk full")
        service = RecognitionService(extractor, catalog, threshold=0.6)
        assert service.recognize(red_image) == NoMatch(score=0.0)
        catalog.log_recognition.assert_called_once_with(None, 0.0, False)

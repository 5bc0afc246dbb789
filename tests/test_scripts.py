"""Tests for the operational scripts: migrations, bulk ingest, offline query, load test."""

from unittest.mock import MagicMock, patch

import pytest

import ingest
import load_test
import migrate
import query
from catalog import LATEST_VERSION
from matcher import Match, NoMatch, RecognitionService


class TestMigrateScript:

    def test_migrates_to_latest(self, tmp_path, capsys):
        path = str(tmp_path / "deploy.db")
        assert migrate.main(["--db", path]) == LATEST_VERSION
        assert f"schema version {LATEST_VERSION}" in capsys.readouterr().out

    def test_partial_target(self, tmp_path):
        assert migrate.main(["--db", str(tmp_path / "d.db"), "--target", "1"]) == 1


class TestIngest:

    def test_ingests_rows_and_skips_missing_images(self, tmp_path, catalog, extractor, red_image):
        (tmp_path / "red.png").write_bytes(red_image)
        csv_path = tmp_path / "paintings.csv"
        csv_path.write_text(
            "title,artist,year,museum,img_path\n"
            "Red Study,Anon,1901,,red.png\n"
            "Ghost,Nobody,,Tate,missing.png\n"
        )

        summary = ingest.ingest_csv(str(csv_path), catalog, extractor, image_base=str(tmp_path))

        assert len(summary["added"]) == 1
        assert summary["skipped"][0][0] == "missing.png"
        entry = catalog.get(summary["added"][0])
        assert entry.has_features
        assert entry.metadata["year"] == "1901"
        assert entry.metadata["museum"] == "National Gallery, London"

    def test_rejects_csv_without_required_columns(self, tmp_path, catalog, extractor):
        csv_path = tmp_path / "bad.csv"
        csv_path.write_text("title,artist\nA,B\n")
        with pytest.raises(ValueError):
            ingest.ingest_csv(str(csv_path), catalog, extractor)


class TestQuery:

    def test_local_file(self, tmp_path, catalog, extractor, red_image):
        path = tmp_path / "photo.png"
        path.write_bytes(red_image)
        catalog.add_painting("Red Study", "Anon", features=extractor.extract(red_image))
        service = RecognitionService(extractor, catalog, threshold=0.6)

        result = query.query_image(str(path), service)
        assert isinstance(result, Match)

    def test_url_is_downloaded(self, catalog, extractor, red_image):
        response = MagicMock(content=red_image)
        service = RecognitionService(extractor, catalog, threshold=0.6)
        with patch("query.requests.get", return_value=response) as get:
            result = query.query_image("https://example.org/photo.png", service)
        get.assert_called_once()
        assert result == NoMatch(score=0.0)


class TestLoadTest:

    def test_reports_each_image(self, tmp_path, red_image):
        for name in ("a.jpg", "b.png", "notes.txt"):
            (tmp_path / name).write_bytes(red_image)
        response = MagicMock(status_code=200, content=b"{}")
        with patch("load_test.requests.post", return_value=response) as post:
            results = load_test.run_load_test(str(tmp_path), url="http://test/api/recognize", users=2)
        assert post.call_count == 2
        assert sorted(r[1] for r in results) == [200, 200]

    def test_missing_file_is_reported(self, tmp_path):
        path, status, detail = load_test.send_image(str(tmp_path / "gone.jpg"))
        assert status == "ERROR"

# matcher/service.py
import time

from logger_setup import service_logger

from .matcher import match
from .types import Match

log = service_logger('recognizer')


class RecognitionService:
    """
    Runs one recognition: extract, read the catalog snapshot, match.

    Catalog writes that follow a recognition (view count, recognition log)
    are handed to ``executor`` and never affect the returned result. With
    no executor they run inline.
    """

    def __init__(self, extractor, catalog, threshold, executor=None):
        self.extractor = extractor
        self.catalog = catalog
        self.threshold = threshold
        self.executor = executor

    def recognize(self, image_bytes):
        features = self.extractor.extract(image_bytes)
        candidates = self.catalog.list_entries_with_features()

        t = time.time()
        result = match(features, candidates, self.threshold)
        log.info(f"[Matching] took {time.time() - t:.4f}s over {len(candidates)} candidates")

        if isinstance(result, Match):
            log.info(f"Recognized painting {result.entry.id} with score {result.score:.4f}")
            self._submit(self._record_match, result.entry.id, result.score)
        else:
            log.info(f"No match above {self.threshold} (best {result.score:.4f})")
            self._submit(self._record_miss, result.score)
        return result

    def add_features(self, painting_id, image_bytes):
        # Fail fast on unknown ids before running the model.
        self.catalog.get(painting_id)
        features = self.extractor.extract(image_bytes)
        entry = self.catalog.store_features(painting_id, features)
        log.info(f"Stored {len(features)} features for painting {painting_id}")
        return entry

    def _record_match(self, painting_id, score):
        self.catalog.increment_view_count(painting_id)
        self.catalog.log_recognition(painting_id, score, True)

    def _record_miss(self, score):
        self.catalog.log_recognition(None, score, False)

    def _submit(self, fn, *args):
        if self.executor is None:
            self._run_logged(fn, *args)
            return None
        return self.executor.submit(self._run_logged, fn, *args)

    @staticmethod
    def _run_logged(fn, *args):
        try:
            fn(*args)
        except Exception as e:
            log.error(f"Background catalog update failed: {e}")

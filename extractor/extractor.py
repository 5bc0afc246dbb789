# extractor

import threading
import time

import numpy as np
from sklearn.preprocessing import normalize

from logger_setup import service_logger

from .errors import ExtractionError, ExtractorNotReady
from .preprocessing import detect_frame, load_image, to_batch

log = service_logger('extractor')

NOT_LOADED = "not_loaded"
LOADING = "loading"
LOADED = "loaded"
FAILED = "failed"


class FeatureExtractor:
    """
    Image -> fixed-length feature vector, backed by a pretrained model.

    The model is loaded once, either synchronously with load() or on a
    background thread with start_loading(). Until it is loaded every
    extract() call raises ExtractorNotReady.
    """

    def __init__(self, module_url, image_size=224, crop_frame=False, loader=None):
        self.module_url = module_url
        self.image_size = image_size
        self.crop_frame = crop_frame
        self._loader = loader
        self._predict = None
        self._state = NOT_LOADED
        self._error = None
        self._lock = threading.Lock()
        self._thread = None

    @property
    def state(self):
        return self._state

    @property
    def ready(self):
        return self._state == LOADED

    @property
    def load_error(self):
        return self._error

    def load(self):
        with self._lock:
            if self._state in (LOADING, LOADED):
                return
            self._state = LOADING
        self._load()

    def start_loading(self):
        with self._lock:
            if self._state in (LOADING, LOADED):
                return self._thread
            self._state = LOADING
        self._thread = threading.Thread(target=self._load, name="model-loader", daemon=True)
        self._thread.start()
        return self._thread

    def wait(self, timeout=None):
        if self._thread is not None:
            self._thread.join(timeout)
        return self.ready

    def _load(self):
        loader = self._loader
        if loader is None:
            from .model import load_hub_model
            loader = load_hub_model
        try:
            t = time.time()
            log.info(f"Loading model from {self.module_url}")
            predict = loader(self.module_url)
        except Exception as e:
            log.error(f"Error loading model: {e}")
            self._error = str(e)
            self._state = FAILED
            return
        self._predict = predict
        self._error = None
        self._state = LOADED
        log.info(f"[Model Load] took {time.time() - t:.4f}s")

    def extract(self, image_bytes):
        if not self.ready:
            raise ExtractorNotReady(f"Feature extractor is {self._state}")

        start_total = time.time()

        t1 = time.time()
        image = load_image(image_bytes)
        if self.crop_frame:
            image = detect_frame(image)
        batch = to_batch(image, self.image_size)
        log.info(f"[Preprocessing] took {time.time() - t1:.4f}s")

        t2 = time.time()
        try:
            output = np.asarray(self._predict(batch), dtype=np.float32)
        except Exception as e:
            raise ExtractionError(f"Model inference failed: {e}") from e
        log.info(f"[Feature Extraction] took {time.time() - t2:.4f}s")

        features = output.reshape(1, -1)
        if features.size == 0:
            raise ExtractionError("Model returned no activations")
        if np.isnan(features).any():
            raise ExtractionError("NaN values found in model output")

        t3 = time.time()
        vector = normalize(features).astype('float32').flatten()
        log.info(f"[Vector Normalization] took {time.time() - t3:.4f}s")

        log.info(f"[Total Extraction Time] {time.time() - start_total:.4f}s")
        return vector

# query.py
import argparse

import requests

import config
from catalog import PaintingCatalog
from extractor import FeatureExtractor
from matcher import Match, RecognitionService


def read_image_bytes(image_path_or_url, timeout=30):
    if image_path_or_url.startswith("http"):
        response = requests.get(image_path_or_url, timeout=timeout)
        response.raise_for_status()
        return response.content
    with open(image_path_or_url, "rb") as f:
        return f.read()


def query_image(image_path_or_url, service):
    return service.recognize(read_image_bytes(image_path_or_url))


def main(argv=None):
    parser = argparse.ArgumentParser(description="Recognize one painting photo against the catalog.")
    parser.add_argument("image", help="local image path or http(s) URL")
    parser.add_argument("--db", default=config.DB_PATH)
    parser.add_argument("--threshold", type=float, default=config.CONFIDENCE_THRESHOLD)
    args = parser.parse_args(argv)

    print("Loading model...")
    extractor = FeatureExtractor(config.MODULE_URL, image_size=config.IMAGE_SIZE, crop_frame=config.CROP_FRAME)
    extractor.load()
    if not extractor.ready:
        raise SystemExit(f"Model failed to load: {extractor.load_error}")
    service = RecognitionService(extractor, PaintingCatalog(args.db), args.threshold)

    result = query_image(args.image, service)
    if isinstance(result, Match):
        meta = result.entry.metadata
        print(f"Painting ID: {result.entry.id}, Similarity: {result.score:.4f}")
        print(f'"{meta["title"]}" by {meta["artist"]} ({meta["museum"]})')
    else:
        print(f"Not recognized. Closest similarity: {result.score:.4f}")
    return result


if __name__ == "__main__":
    main()

# ingest.py
import argparse
import os

import pandas as pd
from tqdm import tqdm

import config
from catalog import PaintingCatalog
from extractor import ExtractionError, FeatureExtractor

REQUIRED_COLUMNS = ("title", "artist", "img_path")


def _value(row, column):
    value = row.get(column)
    if value is None or pd.isna(value):
        return None
    return str(value)


def ingest_csv(csv_path, catalog, extractor, image_base=".", default_museum=config.DEFAULT_MUSEUM):
    """
    Add every row of ``csv_path`` to the catalog with its features.

    Rows whose image is missing or cannot be processed are skipped.
    Returns a dict with ``added`` ids and ``skipped`` (img_path, reason) pairs.
    """
    df = pd.read_csv(csv_path, dtype=str)
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"CSV is missing columns: {', '.join(missing)}")

    added = []
    skipped = []

    for _, row in tqdm(df.iterrows(), total=len(df)):
        img_path = os.path.join(image_base, row['img_path'])
        try:
            with open(img_path, 'rb') as f:
                features = extractor.extract(f.read())
        except (OSError, ExtractionError) as e:
            skipped.append((row['img_path'], str(e)))
            continue

        entry = catalog.add_painting(
            _value(row, 'title'),
            _value(row, 'artist'),
            year=_value(row, 'year'),
            description=_value(row, 'description'),
            museum=_value(row, 'museum') or default_museum,
            wiki_link=_value(row, 'wiki_link'),
            features=features,
        )
        added.append(entry.id)

    return {"added": added, "skipped": skipped}


def main(argv=None):
    parser = argparse.ArgumentParser(description="Bulk-load paintings and their features from a CSV.")
    parser.add_argument("csv", help="CSV with title, artist, img_path and optional metadata columns")
    parser.add_argument("--images", default=".", help="base directory for img_path")
    parser.add_argument("--db", default=config.DB_PATH)
    args = parser.parse_args(argv)

    print("Loading model...")
    extractor = FeatureExtractor(config.MODULE_URL, image_size=config.IMAGE_SIZE, crop_frame=config.CROP_FRAME)
    extractor.load()
    if not extractor.ready:
        raise SystemExit(f"Model failed to load: {extractor.load_error}")

    summary = ingest_csv(args.csv, PaintingCatalog(args.db), extractor, image_base=args.images)
    print(f"Added {len(summary['added'])} paintings, skipped {len(summary['skipped'])}.")
    for img_path, reason in summary['skipped']:
        print(f"  skipped {img_path}: {reason}")
    return summary


if __name__ == "__main__":
    main()

from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone

from flask import Flask, jsonify, request
from werkzeug.exceptions import RequestEntityTooLarge

import config
from catalog import CatalogError, PaintingCatalog, PaintingNotFound
from describer import generate_description, improve_description
from extractor import ExtractionError, ExtractorNotReady, FeatureExtractor
from logger_setup import service_logger
from matcher import Match, RecognitionService

log = service_logger('recognizer')

DEFAULTS = {
    "DB_PATH": config.DB_PATH,
    "MODULE_URL": config.MODULE_URL,
    "IMAGE_SIZE": config.IMAGE_SIZE,
    "CROP_FRAME": config.CROP_FRAME,
    "CONFIDENCE_THRESHOLD": config.CONFIDENCE_THRESHOLD,
    "MAX_CONTENT_LENGTH": config.MAX_UPLOAD_BYTES,
    "DEFAULT_MUSEUM": config.DEFAULT_MUSEUM,
    "ANTHROPIC_API_KEY": config.ANTHROPIC_API_KEY,
    "BACKGROUND_WORKERS": config.BACKGROUND_WORKERS,
    "LOAD_MODEL_ON_START": True,
}


def painting_payload(entry, full=False):
    meta = entry.metadata
    payload = {
        "id": entry.id,
        "title": meta.get("title"),
        "artist": meta.get("artist"),
        "year": meta.get("year"),
        "description": meta.get("description"),
        "museum": meta.get("museum"),
        "wikiLink": meta.get("wiki_link"),
    }
    if full:
        payload.update({
            "viewCount": meta.get("view_count", 0),
            "hasAiFeatures": entry.has_features,
            "processingStatus": meta.get("processing_status"),
            "createdAt": meta.get("created_at"),
        })
    return payload


def failure(message, status, error=None):
    body = {"success": False, "message": message}
    if error is not None:
        body["error"] = error
    return jsonify(body), status


def parse_painting_id(raw):
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


def create_app(overrides=None, extractor=None, catalog=None, executor=None):
    """
    Build the recognition service.

    ``extractor``, ``catalog`` and ``executor`` are injected so tests and
    scripts can swap them. Without an extractor one is built from config
    and, unless LOAD_MODEL_ON_START is false, starts loading in the
    background; recognition answers 503 until it is ready. The background
    writer pool is kept in ``app.extensions["catalog_writer"]`` for shutdown.
    """
    app = Flask(__name__)
    app.config.update(DEFAULTS)
    if overrides:
        app.config.update(overrides)

    if catalog is None:
        catalog = PaintingCatalog(app.config["DB_PATH"])
    if extractor is None:
        extractor = FeatureExtractor(
            app.config["MODULE_URL"],
            image_size=app.config["IMAGE_SIZE"],
            crop_frame=app.config["CROP_FRAME"],
        )
        if app.config["LOAD_MODEL_ON_START"]:
            extractor.start_loading()
    if executor is None and app.config["BACKGROUND_WORKERS"] > 0:
        executor = ThreadPoolExecutor(
            max_workers=app.config["BACKGROUND_WORKERS"], thread_name_prefix="catalog-writer"
        )

    service = RecognitionService(
        extractor, catalog, app.config["CONFIDENCE_THRESHOLD"], executor=executor
    )
    app.extensions["recognizer"] = service
    app.extensions["catalog_writer"] = executor

    def api_key():
        return app.config.get("ANTHROPIC_API_KEY") or ""

    @app.errorhandler(RequestEntityTooLarge)
    def too_large(e):
        return failure("Image too large", 413)

    @app.errorhandler(ExtractorNotReady)
    def not_ready(e):
        return failure("AI model is still loading, try again shortly", 503, str(e))

    @app.errorhandler(PaintingNotFound)
    def not_found(e):
        return failure("Painting not found", 404)

    # ========== ROUTES ==========
    @app.route("/")
    def home():
        return jsonify({
            "message": "ArtSpotter AI Backend",
            "status": "running",
            "aiModel": extractor.state,
            "descriptionAPI": "configured" if api_key() else "not configured",
            "endpoints": {
                "health": "/api/health",
                "paintings": "/api/paintings",
                "recognize": "/api/recognize (POST)",
                "admin": "/api/admin/* (POST)",
            },
            "version": config.VERSION,
        })

    @app.route("/api/health")
    def health():
        try:
            total, with_features = catalog.stats()
        except CatalogError as e:
            log.error(f"Health check failed: {e}")
            return jsonify({"status": "error", "message": str(e), "aiModel": extractor.state}), 500
        return jsonify({
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "paintings": total,
            "paintingsWithAI": with_features,
            "aiModel": extractor.state,
            "descriptionAPI": "configured" if api_key() else "missing",
            "database": "connected",
        })

    @app.route("/api/paintings")
    def paintings():
        try:
            entries = catalog.list_paintings()
        except CatalogError as e:
            log.error(f"Get paintings error: {e}")
            return failure("Failed to fetch paintings", 500, str(e))
        return jsonify({
            "success": True,
            "paintings": [painting_payload(e, full=True) for e in entries],
            "count": len(entries),
        })

    @app.route("/api/recognize", methods=["POST"])
    def recognize():
        image_file = request.files.get("image")
        if image_file is None or image_file.filename == "":
            return failure("No image provided", 400)

        log.info("Processing image recognition...")
        try:
            result = service.recognize(image_file.read())
        except ExtractorNotReady:
            raise
        except (ExtractionError, CatalogError) as e:
            log.error(f"Recognition error: {e}")
            return failure("Recognition processing failed", 500, str(e))

        if isinstance(result, Match):
            return jsonify({
                "success": True,
                "painting": painting_payload(result.entry),
                "confidence": result.score,
                "message": "Painting recognized successfully!",
            })
        return jsonify({
            "success": False,
            "message": "Painting not recognized. Try adjusting angle or lighting.",
            "confidence": result.score,
        })

    @app.route("/api/admin/add-features", methods=["POST"])
    def add_features():
        image_file = request.files.get("image")
        if image_file is None or image_file.filename == "":
            return failure("Image required", 400)
        raw_id = request.form.get("paintingId")
        if not raw_id:
            return failure("Painting ID required", 400)
        painting_id = parse_painting_id(raw_id)
        if painting_id is None:
            return failure("Painting ID must be an integer", 400)

        log.info(f"Processing features for painting ID: {painting_id}")
        try:
            entry = service.add_features(painting_id, image_file.read())
        except (ExtractorNotReady, PaintingNotFound):
            raise
        except (ExtractionError, CatalogError) as e:
            log.error(f"Add features error: {e}")
            return failure("Failed to process features", 500, str(e))

        return jsonify({
            "success": True,
            "message": f'AI features extracted for "{entry.metadata["title"]}" by {entry.metadata["artist"]}',
            "paintingId": painting_id,
            "featureCount": len(entry.features),
        })

    @app.route("/api/admin/paintings", methods=["POST"])
    def add_painting_with_image():
        form = request.form
        image_file = request.files.get("image")
        if image_file is None or image_file.filename == "":
            return failure("Image required", 400)
        if not form.get("title") or not form.get("artist"):
            return failure("Title and artist are required", 400)

        try:
            features = extractor.extract(image_file.read())
            entry = catalog.add_painting(
                form["title"],
                form["artist"],
                year=form.get("year") or None,
                description=form.get("description") or None,
                museum=form.get("museum") or app.config["DEFAULT_MUSEUM"],
                wiki_link=form.get("wikiLink") or None,
                features=features,
            )
        except ExtractorNotReady:
            raise
        except (ExtractionError, CatalogError) as e:
            log.error(f"Add painting error: {e}")
            return failure("Failed to add painting", 500, str(e))

        log.info(f'Added painting: "{entry.metadata["title"]}" by {entry.metadata["artist"]} (ID: {entry.id})')
        return jsonify({
            "success": True,
            "message": "Painting added successfully with AI features",
            "paintingId": entry.id,
            "featureCount": len(entry.features),
        })

    @app.route("/api/admin/add-painting", methods=["POST"])
    def add_painting():
        data = request.get_json(silent=True) or {}
        if not data.get("title") or not data.get("artist"):
            return failure("Title and artist are required", 400)

        try:
            entry = catalog.add_painting(
                data["title"],
                data["artist"],
                year=data.get("year") or None,
                description=data.get("description") or None,
                museum=data.get("museum") or app.config["DEFAULT_MUSEUM"],
                wiki_link=data.get("wikiLink") or None,
            )
        except CatalogError as e:
            log.error(f"Add painting error: {e}")
            return failure("Failed to add painting", 500, str(e))

        log.info(f'Added painting: "{entry.metadata["title"]}" by {entry.metadata["artist"]} (ID: {entry.id})')
        return jsonify({
            "success": True,
            "painting": painting_payload(entry, full=True),
            "message": "Painting added successfully",
        })

    @app.route("/api/admin/process-features", methods=["POST"])
    def process_features():
        try:
            pending = catalog.list_pending()
        except CatalogError as e:
            log.error(f"Processing lookup failed: {e}")
            return failure("Processing failed", 500, str(e))
        return jsonify({
            "success": True,
            "message": f"Found {len(pending)} paintings that need feature processing",
            "paintingsToProcess": [{"id": e.id, "title": e.metadata["title"]} for e in pending],
        })

    @app.route("/api/admin/generate-description", methods=["POST"])
    def generate():
        data = request.get_json(silent=True) or {}
        title, artist = data.get("title"), data.get("artist")
        if not title or not artist:
            return failure("Title and artist are required", 400)

        log.info(f'Generating description for: "{title}" by {artist}')
        description = generate_description(
            title, artist,
            year=data.get("year"),
            museum=data.get("museum") or app.config["DEFAULT_MUSEUM"],
            api_key=api_key(),
        )
        return jsonify({"success": True, "description": description})

    @app.route("/api/admin/improve-description", methods=["POST"])
    def improve():
        data = request.get_json(silent=True) or {}
        current = data.get("currentDescription")
        if not current:
            return failure("Current description is required", 400)

        log.info(f'Improving description for: "{data.get("title")}" by {data.get("artist")}')
        description = improve_description(
            current, title=data.get("title"), artist=data.get("artist"), api_key=api_key()
        )
        return jsonify({"success": True, "description": description})

    return app


# ========== MAIN ==========
if __name__ == '__main__':
    app = create_app()
    log.info(f"ArtSpotter AI server running on port {config.PORT}")
    app.run(host="0.0.0.0", port=config.PORT)

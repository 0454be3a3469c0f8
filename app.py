import logging
from uuid import uuid4

from flask import Flask, current_app, jsonify, request

from errors import ReceiptError, ValidationError
from points import calculate_points
from receipt import Receipt
from store import ReceiptStore

DEFAULT_CONFIG = {
    "HOST": "0.0.0.0",
    "PORT": 5000,
    "LOG_LEVEL": "INFO",
}
CONFIG_ENV_PREFIX = "RECEIPTS"


def create_app(config=None, store=None) -> Flask:
    """
    Builds the Flask application. Settings come from DEFAULT_CONFIG, then any
    RECEIPTS_* environment variables, then the given config mapping. The receipt
    store is owned by the app; pass one in to share or inspect it from tests.
    """
    flask_app = Flask(__name__)
    flask_app.config.from_mapping(DEFAULT_CONFIG)
    flask_app.config.from_prefixed_env(CONFIG_ENV_PREFIX)
    if config:
        flask_app.config.from_mapping(config)
    flask_app.extensions["receipt_store"] = store if store is not None else ReceiptStore()

    flask_app.register_error_handler(ReceiptError, handle_receipt_error)
    flask_app.add_url_rule('/receipts/process', view_func=process_receipt, methods=['POST'])
    flask_app.add_url_rule('/receipts/<receipt_id>/points', view_func=get_points, methods=['GET'])
    flask_app.add_url_rule('/health', view_func=health, methods=['GET'])
    return flask_app


def get_store() -> ReceiptStore:
    return current_app.extensions["receipt_store"]


def handle_receipt_error(e: ReceiptError):
    current_app.logger.warning("%s %s rejected: %s", request.method, request.path, e.message)
    return jsonify({"error": e.message}), e.status_code


def process_receipt():
    """
    Router for receipt processing requests. The input JSON is validated, points
    are calculated for the receipt and a unique id is generated for it. The
    (receipt id -> reward points) mapping is kept in the application's store and
    the id is returned to the user.

    Returns:
        400 Error if input JSON is invalid
        200 OK and generated receipt id if input JSON is valid
    """
    payload = request.get_json(silent=True)
    if payload is None:
        raise ValidationError("Error: request body is not valid JSON")
    receipt = Receipt.from_json(payload)
    points = calculate_points(receipt)
    receipt_id = str(uuid4())
    get_store().put(receipt_id, points)
    current_app.logger.info("processed receipt %s from %s: %d points", receipt_id, receipt.retailer, points)
    return jsonify({"id": receipt_id})


def get_points(receipt_id):
    """
    Router for receipt points lookups. The input receipt id is used to look up
    its previously computed score in the application's store.

    Returns:
        404 Error if the receipt id is not found
        200 OK and the calculated points for the receipt if receipt id is present
    """
    return jsonify({"points": get_store().get(receipt_id)})


def health():
    return jsonify({"status": "ok", "receipts": len(get_store())})


def main():
    flask_app = create_app()
    logging.basicConfig(
        level=flask_app.config["LOG_LEVEL"],
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    # threaded=True lets Flask handle requests concurrently; the store serializes access
    flask_app.run(host=flask_app.config["HOST"], port=flask_app.config["PORT"], threaded=True)


if __name__ == '__main__':
    main()

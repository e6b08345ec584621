import logging
import threading
from contextlib import contextmanager

from flask import Blueprint, Flask, current_app, jsonify, request

from product_cache.exceptions import NotFoundError, SessionStateError, StoreConnectivityError
from product_cache.models.audit import LoggingProductService
from product_cache.models.database import DATABASE_PATH
from product_cache.models.product import Product
from product_cache.models.products import ProductService
from product_cache.utils.cache import HashMapProductCache
from product_cache.utils.logger_setup import setup_logging

logger = logging.getLogger(__name__)

bp = Blueprint('products', __name__)

DEFAULT_CONFIG = {
    'DATABASE_PATH': DATABASE_PATH,
    'USE_CACHE': True,
    'AUDIT_LOG_FILE': None,
}


class InvalidPayload(ValueError):
    pass


@contextmanager
def product_service():
    """Hold the app-wide lock while using the shared service"""
    with current_app.extensions['product_service_lock']:
        yield current_app.extensions['product_service']


def parse_product(payload):
    if not isinstance(payload, dict):
        raise InvalidPayload("Expected a JSON object")
    name = payload.get('name')
    price = payload.get('price')
    if not isinstance(name, str) or not name.strip():
        raise InvalidPayload("'name' must be a non-empty string")
    if isinstance(price, bool) or not isinstance(price, (int, float)):
        raise InvalidPayload("'price' must be a number")
    return Product(name=name, price=float(price))


@bp.route('/products')
def product_list():
    name = request.args.get('name')
    with product_service() as service:
        if name is None:
            products = service.get_all_products()
        else:
            products = service.get_product_by_name(name)
    return jsonify([p.to_dict() for p in products])


@bp.route('/products/<int:product_id>')
def product_detail(product_id):
    with product_service() as service:
        product = service.get_product_by_id(product_id)

    if product is None:
        return jsonify(error="Product not found"), 404
    return jsonify(product.to_dict())


@bp.route('/products', methods=['POST'])
def create_product():
    product = parse_product(request.get_json(silent=True))
    with product_service() as service:
        service.create_product(product)
    return jsonify(product.to_dict()), 201


@bp.route('/products/<int:product_id>', methods=['PUT'])
def update_product(product_id):
    product = parse_product(request.get_json(silent=True))
    product.id = product_id
    with product_service() as service:
        service.update_product(product)
    return jsonify(product.to_dict())


@bp.route('/products/<int:product_id>', methods=['DELETE'])
def delete_product(product_id):
    with product_service() as service:
        service.delete_product(product_id)
    return '', 204


@bp.errorhandler(InvalidPayload)
def handle_invalid_payload(e):
    return jsonify(error=str(e)), 400


@bp.errorhandler(NotFoundError)
def handle_not_found(e):
    return jsonify(error="Product not found", product_id=e.product_id), 404


@bp.errorhandler(SessionStateError)
def handle_session_state(e):
    return jsonify(error=str(e)), 409


@bp.errorhandler(StoreConnectivityError)
def handle_store_error(e):
    logger.error(f"Store failure: {e}")
    return jsonify(error="Product store unavailable"), 503


def create_service(config):
    """Build the product service described by the app config"""
    cache = HashMapProductCache() if config['USE_CACHE'] else None
    service = ProductService(cache=cache, database_path=config['DATABASE_PATH'])
    if config['AUDIT_LOG_FILE']:
        service = LoggingProductService(service, log_file=config['AUDIT_LOG_FILE'])
    return service


def create_app(config=None):
    """
    Application factory; opens the product service session

    Configuration comes from DEFAULT_CONFIG, then PRODUCT_CACHE_* environment
    variables, then the config mapping. Call close_app when done.
    """
    app = Flask(__name__)
    app.config.update(DEFAULT_CONFIG)
    app.config.from_prefixed_env('PRODUCT_CACHE')
    if config:
        app.config.update(config)

    service = create_service(app.config)
    service.open_session()

    # Make the service available to the request handlers
    app.extensions['product_service'] = service
    app.extensions['product_service_lock'] = threading.Lock()
    app.register_blueprint(bp)

    logger.info(f"Serving products from {app.config['DATABASE_PATH']} with {service.cache!r}")
    return app


def close_app(app):
    """Close the product service session opened by create_app"""
    with app.extensions['product_service_lock']:
        app.extensions['product_service'].close_session()


def main():
    setup_logging()
    app = create_app()
    try:
        app.run(debug=True, use_reloader=False)
    finally:
        close_app(app)


if __name__ == '__main__':
    main()

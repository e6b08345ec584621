import logging
from functools import wraps

from product_cache.models.products import ProductService

logger = logging.getLogger(__name__)

AUDIT_LOG_FILE = 'product_management.log'
AUDIT_LOG_FORMAT = '[%(asctime)s] %(message)s'
AUDIT_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def audited(f):
    """Record the call and its arguments on the audit logger before running it"""
    @wraps(f)
    def wrapper(self, *args, **kwargs):
        params = [repr(a) for a in args] + [f'{k}={v!r}' for k, v in kwargs.items()]
        self.audit_logger.info(f"{f.__name__}({', '.join(params)})")
        return f(self, *args, **kwargs)
    return wrapper


class LoggingProductService:
    """
    Wraps a product service and writes every operation to an audit log file

    The file handler is attached when the session opens and closed when
    it ends, so the log file is flushed at session end.
    """

    def __init__(self, service, log_file=AUDIT_LOG_FILE):
        self.service = service
        self.log_file = log_file
        # Unregistered logger, so each instance keeps its own handlers
        self.audit_logger = logging.Logger(f'{__name__}.session')
        self.audit_logger.setLevel(logging.INFO)
        self.audit_logger.propagate = False
        self._handler = None

    @property
    def cache(self):
        return self.service.cache

    @property
    def is_session_open(self):
        return self.service.is_session_open

    def open_session(self):
        handler = logging.FileHandler(self.log_file, encoding='utf-8')
        handler.setFormatter(logging.Formatter(AUDIT_LOG_FORMAT, AUDIT_DATE_FORMAT))
        self.audit_logger.addHandler(handler)
        try:
            self.service.open_session()
        except Exception as e:
            self.audit_logger.error(f"open_session failed: {e}")
            self._detach(handler)
            raise
        self._handler = handler
        self.audit_logger.info("open_session()")

    def close_session(self):
        try:
            self.audit_logger.info("close_session()")
            self.service.close_session()
        finally:
            if self._handler is not None:
                self._detach(self._handler)
                self._handler = None

    def _detach(self, handler):
        self.audit_logger.removeHandler(handler)
        handler.close()
        logger.debug(f"Audit log {self.log_file} closed")

    def __enter__(self):
        self.open_session()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close_session()

    @audited
    def get_product_by_id(self, product_id):
        return self.service.get_product_by_id(product_id)

    @audited
    def get_product_by_name(self, name):
        return self.service.get_product_by_name(name)

    @audited
    def get_all_products(self):
        return self.service.get_all_products()

    @audited
    def create_product(self, product):
        return self.service.create_product(product)

    @audited
    def update_product(self, product):
        return self.service.update_product(product)

    @audited
    def delete_product(self, product_id):
        return self.service.delete_product(product_id)


def create_logging_product_service(cache=None, log_file=AUDIT_LOG_FILE, **service_kwargs):
    """Build a ProductService wrapped in audit logging"""
    return LoggingProductService(ProductService(cache=cache, **service_kwargs), log_file=log_file)

"""Flask application configuration and middleware setup."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

from flask import Flask, g, request
from flask_caching import Cache
from flask_wtf.csrf import CSRFProtect
from prometheus_client import Counter, Histogram

if TYPE_CHECKING:
    from config import Config

# Global instances
cache = Cache()
csrf = CSRFProtect()

# Prometheus metrics
REQUEST_LATENCY = Histogram(
    "http_request_latency_seconds",
    "HTTP request latency",
    ["method", "path"],
    buckets=(0.05, 0.1, 0.25, 0.5, 1, 2, 5, 10),
)
REQUEST_ERRORS = Counter(
    "http_request_errors_total",
    "Total number of 5xx responses",
    ["method", "path"],
)

# Requests that wait out the wheel animation on purpose
SLOW_REQUEST_EXEMPT_SUFFIXES = ("/complete",)
SLOW_REQUEST_SECONDS = 1.0


def configure_app(app: Flask, config: Config, testing: bool = False) -> None:
    """Configure Flask application settings.
    
    Args:
        app: Flask application instance
        config: Application configuration
        testing: Whether running in testing mode
    """
    app.config.update(
        SECRET_KEY=config.secret_key,
        MAX_CONTENT_LENGTH=64 * 1024,
        SESSION_COOKIE_HTTPONLY=True,
        SESSION_COOKIE_SECURE=(config.environment != 'development'),
        SESSION_COOKIE_SAMESITE='Lax',
        DATABASE_PATH=config.database_path,
        TESTING=testing,
        WTF_CSRF_TIME_LIMIT=None,
        WTF_CSRF_HEADERS=['X-CSRFToken', 'X-CSRF-Token'],
        CACHE_TYPE="SimpleCache",
        CACHE_DEFAULT_TIMEOUT=config.rewards_cache_ttl,
    )
    
    # Warn if insecure defaults detected
    if config.environment == 'production' and config.secret_key.startswith("booth_secret_key"):
        app.logger.warning("SECRET_KEY is not set properly")


def setup_extensions(app: Flask, testing: bool = False) -> None:
    """Setup Flask extensions.
    
    Args:
        app: Flask application instance
        testing: Whether running in testing mode
    """
    cache.init_app(app)
    
    # Initialize CSRF protection (disabled in testing)
    if not testing:
        csrf.init_app(app)


def setup_security_headers(app: Flask) -> None:
    """Setup security headers middleware.
    
    Args:
        app: Flask application instance
    """
    @app.after_request
    def add_security_headers(response):
        """Add security headers to all responses."""
        response.headers.setdefault('Content-Security-Policy', "default-src 'self'")
        response.headers.setdefault('X-Content-Type-Options', 'nosniff')
        response.headers.setdefault('X-Frame-Options', 'DENY')
        response.headers.setdefault('Referrer-Policy', 'same-origin')
        response.headers.setdefault('Permissions-Policy', "camera=(), microphone=(), geolocation=()")
        return response


def setup_metrics(app: Flask) -> None:
    """Setup Prometheus metrics and slow request logging.
    
    Args:
        app: Flask application instance
    """
    @app.before_request
    def before_metrics():
        """Store request start time."""
        g._metrics_start = time.perf_counter()
    
    @app.after_request
    def after_metrics(response):
        """Record request metrics."""
        start = getattr(g, '_metrics_start', None)
        path = getattr(request.url_rule, 'rule', request.path)
        if start is not None:
            duration = time.perf_counter() - start
            REQUEST_LATENCY.labels(method=request.method, path=path).observe(duration)
            response.headers['X-Response-Time'] = f"{duration:.3f}s"
            if duration > SLOW_REQUEST_SECONDS and not request.path.endswith(SLOW_REQUEST_EXEMPT_SUFFIXES):
                app.logger.warning(f"Slow request: {request.method} {request.path} took {duration:.2f}s")
        
        # Record 5xx errors
        if response.status_code >= 500:
            REQUEST_ERRORS.labels(method=request.method, path=path).inc()
        return response

"""
OpenTelemetry instrumentation for FastAPI and the MongoDB driver.

Spans are created locally; exporting them is left to whatever collector the
deployment configures through the standard OTEL_* environment variables.
"""

from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.pymongo import PymongoInstrumentor

from app.core.logger import logger


def instrument_app(app):
    """
    Instrument the FastAPI application and PyMongo (used under motor).

    Args:
        app: FastAPI application instance
    """
    try:
        FastAPIInstrumentor.instrument_app(app)
        PymongoInstrumentor().instrument()
        logger.info(
            "OpenTelemetry instrumentation complete",
            metadata={"event": "telemetry_instrumented"},
        )
    except Exception as e:
        # Tracing is optional; the service keeps running without it
        logger.error("Failed to instrument application", error=e)

"""
Serverless entrypoint.

The platform imports `app` from this module once per execution context.
Database startup happens lazily on the first invocation and never aborts
the function (see app.serverless).
"""

from app.config import settings
from app.main import create_app, setup_logging

setup_logging(settings.log_level)

app = create_app(serverless=True)

"""ASGI entry point for the otpgate service.

Loads the environment, configures logging, refuses to start without the
identity provider credentials, then builds the app through the factory.
Serve it with any ASGI server, e.g. ``src.main:app``.
"""

from src.core.application import create_application
from src.core.initialization import initialize_application

initialize_application()

app = create_application()

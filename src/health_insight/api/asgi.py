"""ASGI entrypoint for the health insight API."""

from health_insight.api.app import create_app
from health_insight.containers import build_container

app = create_app(build_container())

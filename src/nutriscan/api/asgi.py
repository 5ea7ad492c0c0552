"""ASGI entrypoint for the food analysis API."""

from nutriscan.api.app import create_app
from nutriscan.containers import build_container

app = create_app(build_container())

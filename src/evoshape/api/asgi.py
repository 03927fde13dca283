"""ASGI entrypoint for the EvoShape API."""

from evoshape.api.app import create_app
from evoshape.containers import build_container

app = create_app(build_container())

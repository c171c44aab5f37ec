"""ASGI entrypoint for the FreshCart API."""

from freshcart.api.app import create_app
from freshcart.containers import build_container

app = create_app(build_container())

"""ASGI entrypoint for the MyFridge API."""

from myfridge.api.app import create_app
from myfridge.containers import build_container

app = create_app(build_container())

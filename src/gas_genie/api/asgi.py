"""ASGI entrypoint for the Gas Genie API."""

from gas_genie.api.app import create_app
from gas_genie.containers import build_container

app = create_app(build_container())

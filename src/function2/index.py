"""Function2 entry point, loaded by the execution service as ``index.handler``."""

from service.handlers.payload_handler import make_handler

handler = make_handler("This is function2")

"""HTTP greeting function deployed as ``http_example.handler.handler``."""

from .app import create_app, main, parse_int_param, parse_limit

__all__ = ["create_app", "main", "parse_int_param", "parse_limit"]

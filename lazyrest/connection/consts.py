LAZYREST_SESSION_KEY = "__session__"
DEFAULT_TIMEOUT = 10.0
JSON_CONTENT_TYPE = "application/json"

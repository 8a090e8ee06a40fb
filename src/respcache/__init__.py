"""respcache -- per-request, file-backed response cache for web controllers.

A controller builds one :class:`~respcache.cache.ResponseCache` per incoming
request, passing a stable identity (usually its own ``__file__``) and the
request's query/body parameters. The cache derives an MD5 key from those
inputs and memoizes the controller's output as a flat file for a configurable
number of seconds.

Typical usage::

    cache = ResponseCache(__file__, duration=300, query=request.query, body=request.form)
    cached = cache.get()
    if cached is None:
        body = render_report()
        cache.set(body)

Modules:
    cache: The :class:`ResponseCache` itself plus key derivation and locking.
    models: Pydantic models for configuration and directory listings.
    config: Default paths, project config file, and precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    app: Typer CLI for inspecting and purging a cache directory.
"""

__version__ = "0.1.0"

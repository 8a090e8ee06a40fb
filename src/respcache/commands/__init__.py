"""Built-in CLI commands for respcache.

* :mod:`~respcache.commands.key` -- ``respcache key``
* :mod:`~respcache.commands.entries` -- ``list``, ``stats``, ``purge``, ``clear``
* :mod:`~respcache.commands.config` -- ``respcache config``
"""

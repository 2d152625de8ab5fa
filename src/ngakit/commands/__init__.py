"""Built-in CLI sub-command groups.

Each module defines one Typer sub-application registered on the root app
in :func:`ngakit.app.main`:

* :mod:`~ngakit.commands.forum` -- ``ngakit forum ...``
* :mod:`~ngakit.commands.topic` -- ``ngakit topic ...``
* :mod:`~ngakit.commands.post` -- ``ngakit post ...``
* :mod:`~ngakit.commands.user` -- ``ngakit user ...``
* :mod:`~ngakit.commands.notification` -- ``ngakit notification ...``
* :mod:`~ngakit.commands.message` -- ``ngakit message ...``
* :mod:`~ngakit.commands.auth` -- ``ngakit auth login|logout|status``
* :mod:`~ngakit.commands.cache` -- ``ngakit cache stats|clear``
* :mod:`~ngakit.commands.config` -- ``ngakit config show|set|reset``
"""

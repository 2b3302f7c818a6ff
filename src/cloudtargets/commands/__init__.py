"""Built-in CLI sub-commands for cloudtargets.

* :mod:`~cloudtargets.commands.collections` -- target collection commands,
  including the blocking ``generate``.
* :mod:`~cloudtargets.commands.targets` -- target commands, including the
  blocking ``add-many``.
* :mod:`~cloudtargets.commands.config` -- view and modify user settings.

Each module exports a :class:`typer.Typer` sub-application that
:func:`cloudtargets.app.main` registers on the root app.
"""

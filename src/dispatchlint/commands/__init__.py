"""Built-in CLI sub-commands for dispatchlint.

* :mod:`~dispatchlint.commands.check` -- run the safety checks and exit
  non-zero when deployment must be refused.
* :mod:`~dispatchlint.commands.routes` -- list the normalized operations the
  checks evaluate.

Each module exports a plain callback function registered directly on the root
app in :func:`dispatchlint.app.main`.
"""

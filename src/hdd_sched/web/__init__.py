"""Browser-facing JSON API for the disk scheduling simulator.

This package provides a Flask application that exposes the engine and
the experiment harness over HTTP.  It is an **optional** extra — install
with::

    pip install hdd-sched[web]

The ``create_app`` factory in ``app.py`` serves four endpoints:

- ``GET /`` — short service description and available policies.
- ``GET /api/geometry`` — the simulated drive's parameters.
- ``POST /api/simulate`` — replay one request batch under one policy.
- ``POST /api/experiment`` — run a (small) load sweep.
"""

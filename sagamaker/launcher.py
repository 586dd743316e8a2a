"""Saga Maker launcher.

Runs the dependency preflight before importing GTK-related modules.
"""

from __future__ import annotations


def main() -> int:
    from sagamaker.preflight import run_preflight_or_die

    run_preflight_or_die(check_deps=True)

    from sagamaker.app import main as app_main

    return int(app_main())


if __name__ == "__main__":
    raise SystemExit(main())

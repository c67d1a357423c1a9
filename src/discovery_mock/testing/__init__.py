"""Test-suite helpers for projects that talk to the discovery mock."""

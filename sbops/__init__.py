"""Operator tooling for SuperBench.

Wraps the SuperBench CLI (``sb``) and the third-party Makefile build with a
small command-line program:

- install: bootstrap the virtual environment and install SuperBench
- build: build the micro-benchmark binaries
- sysinfo: collect system information from the local or remote nodes
- run: deploy and run benchmarks against an inventory
"""

__version__ = "0.1.0"

"""Performance benchmarks for profilecross.

This package contains microbenchmarks for the crossing search and the
re-minimizations it drives.
"""

"""Performance benchmarks for unconopt.

Times both optimizers on the extended Rosenbrock and Wood functions.
"""

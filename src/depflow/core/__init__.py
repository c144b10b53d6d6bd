"""
depflow core: dependency engine, storage, configuration and errors
"""

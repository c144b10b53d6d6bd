"""
CLI tools for depflow
"""

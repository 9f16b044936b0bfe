"""
Core building blocks shared by both copy jobs: configuration loading,
credential helpers, errors and logging.
"""

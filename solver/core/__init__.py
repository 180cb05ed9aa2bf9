"""
Core processing logic: the question queue, the solving consumer, the
pipeline coordinator and the request-level DocumentProcessor.
"""

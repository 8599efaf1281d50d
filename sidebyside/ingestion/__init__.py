"""External lookup clients.

- wikipedia_client.py: opensearch + pageimages lookup used to validate entity candidates
"""
